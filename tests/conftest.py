"""Pytest fixtures for profcopy tests."""

import io
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Dict, Generator, Iterable, List

import pytest
from rich.console import Console

from profcopy.models import (
    DataType,
    DataTypeSelection,
    ManifestItem,
    MergeOptions,
    ProfileInfo,
    ProfileManifest,
)
from profcopy.operations import BackupEngine
from profcopy.registry import get_descriptor
from profcopy.ui import CopyTUI


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: end-to-end workflow tests")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_backup_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the process-wide backup directory at a per-test location."""
    backup_dir = tmp_path / "default_backups"
    monkeypatch.setenv("PROFCOPY_BACKUP_DIR", str(backup_dir))
    return backup_dir


@pytest.fixture
def backup_dir(temp_dir: Path) -> Path:
    """Backup directory for an explicitly configured BackupEngine (not created)."""
    return temp_dir / "backups"


@pytest.fixture
def backup_engine(backup_dir: Path) -> BackupEngine:
    return BackupEngine(backup_dir)


@pytest.fixture
def profile_tree(temp_dir: Path) -> Dict[str, Path]:
    """Create a database root with a source and a target profile.

    Creates:
        temp_dir/root/
        └── profiles/
            ├── Source/DATABASE/
            │   ├── service.map     (b"source services")
            │   ├── Material.MAP    (b"source materials")
            │   └── SUPPLIER.MAP    (b"source suppliers")
            └── Target/DATABASE/
                ├── service.map     (b"target services")
                ├── A.MAP           (b"target A")
                └── sub/notes.txt   (b"nested notes")

    Returns:
        Dictionary with 'root', 'source_db' and 'target_db' paths.
    """
    root = temp_dir / "root"

    source_db = root / "profiles" / "Source" / "DATABASE"
    source_db.mkdir(parents=True)
    (source_db / "service.map").write_bytes(b"source services")
    (source_db / "Material.MAP").write_bytes(b"source materials")
    (source_db / "SUPPLIER.MAP").write_bytes(b"source suppliers")

    target_db = root / "profiles" / "Target" / "DATABASE"
    (target_db / "sub").mkdir(parents=True)
    (target_db / "service.map").write_bytes(b"target services")
    (target_db / "A.MAP").write_bytes(b"target A")
    (target_db / "sub" / "notes.txt").write_bytes(b"nested notes")

    return {"root": root, "source_db": source_db, "target_db": target_db}


@pytest.fixture
def source_profile(profile_tree: Dict[str, Path]) -> ProfileInfo:
    source_db = profile_tree["source_db"]
    return ProfileInfo(name="Source", path=source_db.parent, database_path=source_db)


def make_selections(*data_types: DataType, available: bool = True) -> List[DataTypeSelection]:
    """Build selected session records for the given data types, in order."""
    return [
        DataTypeSelection(
            descriptor=get_descriptor(data_type),
            is_selected=True,
            is_available=available,
        )
        for data_type in data_types
    ]


def make_options(*data_types: DataType, create_backup: bool = True) -> MergeOptions:
    return MergeOptions(create_backup=create_backup, selected_data_types=make_selections(*data_types))


def snapshot_tree(directory: Path) -> Dict[str, bytes]:
    """Map of relative POSIX path to file bytes for every file under ``directory``."""
    return {
        path.relative_to(directory).as_posix(): path.read_bytes()
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


class FakeItemStore:
    """In-memory ItemStore recording deletions and saves."""

    def __init__(self, items: Dict[str, List[ManifestItem]]) -> None:
        self.items = {key: list(values) for key, values in items.items()}
        self.saved: List[str] = []
        self.failing_keys: set = set()

    def list_items(self, manifest_key: str) -> Iterable[ManifestItem]:
        if manifest_key in self.failing_keys:
            raise RuntimeError(f"{manifest_key} collection unavailable")
        return list(self.items.get(manifest_key, []))

    def delete_items(self, manifest_key: str, names: List[str]) -> int:
        before = len(self.items.get(manifest_key, []))
        self.items[manifest_key] = [
            item for item in self.items.get(manifest_key, []) if item.name not in names
        ]
        return before - len(self.items[manifest_key])

    def save(self, manifest_key: str) -> None:
        self.saved.append(manifest_key)


@pytest.fixture
def fake_item_store() -> FakeItemStore:
    return FakeItemStore({
        "Services": [
            ManifestItem("Duct", "HVAC"),
            ManifestItem("Pipe", "Plumbing"),
            ManifestItem("Cable Tray", "Electrical"),
        ],
        "Materials": [ManifestItem("Galvanised"), ManifestItem("Copper")],
        "Layers": [ManifestItem("Should not be listed")],
    })


@pytest.fixture
def sample_manifest(profile_tree: Dict[str, Path]) -> ProfileManifest:
    return ProfileManifest(
        profile_name="Source",
        database_path=str(profile_tree["source_db"]),
        generated_at=datetime(2024, 3, 1, 12, 30, 0),
        data_types={
            "Services": [
                ManifestItem("Duct", "HVAC"),
                ManifestItem("Pipe", "Plumbing"),
                ManifestItem("Cable Tray", "Electrical"),
            ],
            "Materials": [ManifestItem("Galvanised"), ManifestItem("Copper")],
            "Seams": [ManifestItem("Pittsburgh")],
        },
    )


@pytest.fixture
def tui_with_captured_output() -> CopyTUI:
    """Create a CopyTUI with Console output captured to StringIO.

    Access captured output via: tui.console.file.getvalue()
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=160)
    return CopyTUI(console=console)
