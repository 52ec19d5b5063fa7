"""
Core data models for profile data copying.

This module contains the following dataclasses:
- DataTypeDescriptor: Immutable catalog entry for a copyable data file
- DataTypeSelection: Per-session selection state for one descriptor
- MergeOptions: Caller-built options for a single copy operation
- ProfileInfo: A profile on disk and its DATABASE folder
- CopyProgress: Progress notification emitted during a copy
- CopyResult: Outcome of a single copy operation
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .data_type import DataType


@dataclass(frozen=True)
class DataTypeDescriptor:
    """Immutable registry entry describing one copyable data file."""
    data_type: DataType               # Variant identity
    display_name: str                 # Human-readable name
    file_name: str                    # Exact on-disk file name
    group: str                        # Display grouping
    is_enumerable: bool = False       # Host exposes an item collection
    supports_selective_cleanup: bool = False  # Items deletable after restart
    manifest_key: Optional[str] = None  # Key into ProfileManifest.data_types


@dataclass
class DataTypeSelection:
    """Per-session selection record for a single data type."""
    descriptor: DataTypeDescriptor
    is_selected: bool = False
    is_available: bool = False        # Source file exists
    selected_items: Optional[List[str]] = None  # None = copy all
    manifest_item_count: Optional[int] = None   # Total items, for display

    @property
    def data_type(self) -> DataType:
        return self.descriptor.data_type

    @property
    def file_name(self) -> str:
        return self.descriptor.file_name

    @property
    def display_name(self) -> str:
        return self.descriptor.display_name

    @property
    def effective_selected_items(self) -> Optional[List[str]]:
        """Allow-list of item names to keep, or None when the whole file is kept.

        A selected item list on a data type without a manifest key or without
        selective cleanup support is display-only and treated as "copy all".
        """
        if self.selected_items is None:
            return None
        if not self.descriptor.manifest_key or not self.descriptor.supports_selective_cleanup:
            return None
        return self.selected_items

    @property
    def selection_indicator(self) -> str:
        """Text like "(35/45)" when an item filter is applied, empty otherwise."""
        if self.selected_items is not None and self.manifest_item_count is not None:
            return f"({len(self.selected_items)}/{self.manifest_item_count})"
        return ""


@dataclass
class MergeOptions:
    """Options for a profile data copy operation."""
    create_backup: bool = True
    selected_data_types: List[DataTypeSelection] = field(default_factory=list)

    @property
    def requires_reload(self) -> bool:
        """Always True; the host application must restart to pick up copied files."""
        return True


@dataclass
class ProfileInfo:
    """A profile on the filesystem."""
    name: str
    path: Path
    database_path: Optional[Path]
    version: str = ""
    is_current: bool = False

    def is_valid(self) -> bool:
        """Check whether the profile's DATABASE folder exists."""
        if not self.database_path:
            return False
        return Path(self.database_path).is_dir()

    def __str__(self) -> str:
        suffix = " (Current)" if self.is_current else ""
        return f"{self.name}{suffix} [{self.version}]"


@dataclass(frozen=True)
class CopyProgress:
    """Progress notification emitted by the copy orchestrator."""
    message: str
    current: int
    total: int

    @property
    def percent_complete(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.current / self.total * 100


@dataclass
class CopyResult:
    """Tracks the outcome of a single copy operation."""
    success: bool = False
    error_message: str = ""           # Populated only on failure
    backup_path: str = ""             # Empty if no backup was created
    copied_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    duration: float = 0.0             # Elapsed seconds
    restored: Optional[bool] = None   # None = no restore attempted

    def get_summary(self) -> str:
        """Return a user-facing summary of the copy operation."""
        lines: List[str] = []

        if self.success:
            lines.append("Profile data copy completed successfully.")
            lines.append("")
            lines.append(f"Files copied: {len(self.copied_files)}")
            lines.extend(f"  - {name}" for name in self.copied_files)

            if self.skipped_files:
                lines.append("")
                lines.append(f"Files skipped (not found in source): {len(self.skipped_files)}")
                lines.extend(f"  - {name}" for name in self.skipped_files)

            if self.backup_path:
                lines.append("")
                lines.append(f"Backup saved to: {self.backup_path}")

            lines.append("")
            lines.append(f"Duration: {self.duration:.1f} seconds")
            lines.append("")
            lines.append(
                "IMPORTANT: You must restart the host application for changes to take effect."
            )
        else:
            lines.append("Profile data copy failed.")
            lines.append("")
            lines.append(f"Error: {self.error_message}")

        return "\n".join(lines)
