"""
Unit tests for profcopy data models.

Tests cover:
- DataTypeSelection effective item list and selection indicator
- MergeOptions defaults
- ProfileInfo validity and display
- CopyProgress percentage
- CopyResult defaults and summaries
- Manifest and PendingCleanup JSON shapes
"""

import dataclasses
import json
from datetime import datetime
from pathlib import Path

import pytest

from profcopy.models import (
    CopyProgress,
    CopyResult,
    DataType,
    DataTypeDescriptor,
    DataTypeSelection,
    ManifestItem,
    MergeOptions,
    PendingCleanup,
    ProfileInfo,
    ProfileManifest,
)
from profcopy.models.manifest import parse_timestamp
from profcopy.registry import get_descriptor


@pytest.mark.unit
class TestDataTypeDescriptor:
    """Tests for the immutable catalog entry."""

    def test_descriptor_is_frozen(self):
        descriptor = get_descriptor(DataType.SERVICES)
        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.file_name = "other.map"

    def test_defaults_have_no_selective_support(self):
        descriptor = DataTypeDescriptor(DataType.LEADS, "Leads", "LEADS.MAP", "Other")
        assert descriptor.is_enumerable is False
        assert descriptor.supports_selective_cleanup is False
        assert descriptor.manifest_key is None


@pytest.mark.unit
class TestDataTypeSelection:
    """Tests for per-session selection state."""

    def test_new_selection_copies_all(self):
        selection = DataTypeSelection(descriptor=get_descriptor(DataType.SERVICES))
        assert selection.is_selected is False
        assert selection.is_available is False
        assert selection.effective_selected_items is None

    def test_selected_items_kept_when_cleanup_supported(self):
        selection = DataTypeSelection(
            descriptor=get_descriptor(DataType.SERVICES),
            selected_items=["Duct"],
        )
        assert selection.effective_selected_items == ["Duct"]

    def test_selected_items_ignored_without_cleanup_support(self):
        """Seams are enumerable but cannot be cleaned up: the list is display-only."""
        selection = DataTypeSelection(
            descriptor=get_descriptor(DataType.SEAMS),
            selected_items=["Pittsburgh"],
        )
        assert selection.effective_selected_items is None

    def test_selected_items_ignored_without_manifest_key(self):
        descriptor = DataTypeDescriptor(
            DataType.NOTES, "Notes", "Notes.MAP", "Other", supports_selective_cleanup=True
        )
        selection = DataTypeSelection(descriptor=descriptor, selected_items=["x"])
        assert selection.effective_selected_items is None

    def test_selection_indicator(self):
        selection = DataTypeSelection(
            descriptor=get_descriptor(DataType.SERVICES),
            selected_items=["Duct", "Pipe"],
            manifest_item_count=45,
        )
        assert selection.selection_indicator == "(2/45)"

    def test_selection_indicator_empty_without_count(self):
        selection = DataTypeSelection(
            descriptor=get_descriptor(DataType.SERVICES),
            selected_items=["Duct"],
        )
        assert selection.selection_indicator == ""

    def test_passthrough_properties(self):
        selection = DataTypeSelection(descriptor=get_descriptor(DataType.MATERIALS))
        assert selection.data_type is DataType.MATERIALS
        assert selection.file_name == "Material.MAP"
        assert selection.display_name == "Materials"


@pytest.mark.unit
class TestMergeOptions:

    def test_defaults(self):
        options = MergeOptions()
        assert options.create_backup is True
        assert options.selected_data_types == []
        assert options.requires_reload is True

    def test_requires_reload_is_read_only(self):
        options = MergeOptions(create_backup=False)
        with pytest.raises(AttributeError):
            options.requires_reload = False


@pytest.mark.unit
class TestProfileInfo:

    def test_valid_when_database_exists(self, temp_dir: Path):
        db = temp_dir / "DATABASE"
        db.mkdir()
        profile = ProfileInfo(name="Shop", path=temp_dir, database_path=db)
        assert profile.is_valid()

    def test_invalid_when_database_missing(self, temp_dir: Path):
        profile = ProfileInfo(name="Shop", path=temp_dir, database_path=temp_dir / "missing")
        assert not profile.is_valid()

    def test_invalid_when_database_path_empty(self, temp_dir: Path):
        profile = ProfileInfo(name="Shop", path=temp_dir, database_path=None)
        assert not profile.is_valid()

    def test_invalid_when_database_is_file(self, temp_dir: Path):
        db = temp_dir / "DATABASE"
        db.write_text("not a folder")
        profile = ProfileInfo(name="Shop", path=temp_dir, database_path=db)
        assert not profile.is_valid()

    def test_str(self, temp_dir: Path):
        profile = ProfileInfo(
            name="Shop", path=temp_dir, database_path=None, version="2024", is_current=True
        )
        assert str(profile) == "Shop (Current) [2024]"


@pytest.mark.unit
class TestCopyProgress:

    def test_percent_complete(self):
        assert CopyProgress("x", 1, 4).percent_complete == 25.0

    def test_percent_complete_zero_total(self):
        assert CopyProgress("x", 0, 0).percent_complete == 0.0


@pytest.mark.unit
class TestCopyResult:

    def test_defaults(self):
        result = CopyResult()
        assert result.success is False
        assert result.error_message == ""
        assert result.backup_path == ""
        assert result.copied_files == []
        assert result.skipped_files == []
        assert result.duration == 0.0
        assert result.restored is None

    def test_lists_are_not_shared(self):
        first = CopyResult()
        first.copied_files.append("service.map")
        assert CopyResult().copied_files == []

    def test_success_summary(self):
        result = CopyResult(
            success=True,
            backup_path="/backups/Backup_Shop_20240101_120000.zip",
            copied_files=["service.map", "Material.MAP"],
            skipped_files=["Specs.MAP"],
            duration=1.25,
        )
        summary = result.get_summary()
        assert "completed successfully" in summary
        assert "Files copied: 2" in summary
        assert "  - service.map" in summary
        assert "Files skipped (not found in source): 1" in summary
        assert "Backup saved to: /backups/Backup_Shop_20240101_120000.zip" in summary
        assert "Duration: 1.2 seconds" in summary or "Duration: 1.3 seconds" in summary
        assert "restart" in summary

    def test_success_summary_without_skips_or_backup(self):
        summary = CopyResult(success=True, copied_files=["service.map"]).get_summary()
        assert "skipped" not in summary
        assert "Backup saved" not in summary

    def test_failure_summary(self):
        result = CopyResult(
            success=False,
            error_message="Error during copy: disk full\n\nThe backup has been restored automatically.",
        )
        summary = result.get_summary()
        assert summary.startswith("Profile data copy failed.")
        assert "Error: Error during copy: disk full" in summary
        assert "restored automatically" in summary


@pytest.mark.unit
class TestManifestRecords:
    """Tests for the persisted JSON shapes."""

    def test_manifest_to_dict_keys(self):
        manifest = ProfileManifest(
            profile_name="Shop",
            database_path="/p/Shop/DATABASE",
            generated_at=datetime(2024, 3, 1, 12, 30, 0),
            data_types={"Services": [ManifestItem("Duct", "HVAC"), ManifestItem("Pipe")]},
        )
        data = manifest.to_dict()
        assert data == {
            "profileName": "Shop",
            "databasePath": "/p/Shop/DATABASE",
            "generatedAt": "2024-03-01T12:30:00",
            "dataTypes": {
                "Services": [
                    {"name": "Duct", "group": "HVAC"},
                    {"name": "Pipe", "group": None},
                ]
            },
        }

    def test_manifest_from_dict(self):
        manifest = ProfileManifest.from_dict({
            "profileName": "Shop",
            "databasePath": "/p",
            "generatedAt": "2024-03-01T12:30:00",
            "dataTypes": {"Materials": [{"name": "Copper"}]},
        })
        assert manifest.generated_at == datetime(2024, 3, 1, 12, 30, 0)
        assert manifest.data_types["Materials"][0] == ManifestItem("Copper", None)
        assert manifest.item_names("Materials") == ["Copper"]
        assert manifest.item_names("Services") == []

    def test_manifest_from_dict_missing_key(self):
        with pytest.raises(KeyError):
            ProfileManifest.from_dict({"profileName": "Shop"})

    def test_pending_cleanup_to_dict_keys(self):
        cleanup = PendingCleanup(
            profile_name="Shop",
            database_path="/t/DATABASE",
            created_at=datetime(2024, 3, 2, 8, 0, 0),
            items_to_delete={"Services": ["Pipe"]},
        )
        assert cleanup.to_dict() == {
            "profileName": "Shop",
            "databasePath": "/t/DATABASE",
            "createdAt": "2024-03-02T08:00:00",
            "itemsToDelete": {"Services": ["Pipe"]},
        }

    def test_pending_cleanup_from_dict_without_items(self):
        cleanup = PendingCleanup.from_dict({
            "profileName": "Shop",
            "databasePath": "/t",
            "createdAt": "2024-03-02T08:00:00",
        })
        assert cleanup.items_to_delete == {}


@pytest.mark.unit
class TestTimestampParsing:
    """Records written by .NET DataContract JSON use /Date(ms)/ timestamps."""

    def test_iso_format(self):
        assert parse_timestamp("2024-03-01T12:30:00") == datetime(2024, 3, 1, 12, 30, 0)

    @pytest.mark.parametrize("value", ["/Date(1709296200000)/", "/Date(1709296200000+0100)/"])
    def test_dotnet_format(self, value):
        assert parse_timestamp(value) == datetime.fromtimestamp(1709296200)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("/Date(abc)/")

    def test_manifest_from_dotnet_json(self):
        data = json.loads(
            '{"profileName": "Shop", "databasePath": "C:\\\\P\\\\DATABASE",'
            ' "generatedAt": "\\/Date(1709296200000+0000)\\/", "dataTypes": {}}'
        )
        manifest = ProfileManifest.from_dict(data)
        assert manifest.generated_at == datetime.fromtimestamp(1709296200)
        assert manifest.database_path == "C:\\P\\DATABASE"

    def test_pending_cleanup_from_dotnet_json(self):
        cleanup = PendingCleanup.from_dict({
            "profileName": "Shop",
            "databasePath": "/t",
            "createdAt": "/Date(1709366400000)/",
            "itemsToDelete": {"Services": ["Pipe"]},
        })
        assert cleanup.created_at == datetime.fromtimestamp(1709366400)
