"""
Models package for profile data copying.

This package provides convenient imports for all data models:
- DataType: Enum of copyable data types
- DataTypeDescriptor: Immutable registry entry
- DataTypeSelection: Per-session selection state
- MergeOptions: Copy operation options
- ProfileInfo: Profile location on disk
- CopyProgress: Progress notification
- CopyResult: Copy operation outcome
- ManifestItem, ProfileManifest, PendingCleanup: Selective-copy records
"""

from .data_type import DataType
from .data_models import (
    DataTypeDescriptor,
    DataTypeSelection,
    MergeOptions,
    ProfileInfo,
    CopyProgress,
    CopyResult,
)
from .manifest import ManifestItem, ProfileManifest, PendingCleanup

__all__ = [
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
