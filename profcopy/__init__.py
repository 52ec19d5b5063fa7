"""Profcopy - Profile Data Copy Tool.

Copies a curated set of data files from one profile DATABASE folder to
another, snapshotting the destination first and restoring it automatically
if the copy fails.
"""

__version__ = "0.1.0"

from .models import (
    DataType,
    DataTypeDescriptor,
    DataTypeSelection,
    MergeOptions,
    ProfileInfo,
    CopyProgress,
    CopyResult,
    ManifestItem,
    ProfileManifest,
    PendingCleanup,
)

__all__ = [
    "__version__",
    "DataType",
    "DataTypeDescriptor",
    "DataTypeSelection",
    "MergeOptions",
    "ProfileInfo",
    "CopyProgress",
    "CopyResult",
    "ManifestItem",
    "ProfileManifest",
    "PendingCleanup",
]


def main() -> None:
    """Entry point for the profcopy CLI application."""
    from profcopy.cli import app
    app()
