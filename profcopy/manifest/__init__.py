"""Manifest package for profcopy.

This package holds the selective-copy bookkeeping:
- ManifestStore: Generate, save and load per-profile manifests.
- SelectiveCleanupService: Build, persist and execute pending cleanups.
- ItemStore: Protocol for the host's per-data-type item collections.
"""

from .item_store import ItemStore
from .manifest_store import ManifestStore, apply_manifest_counts
from .cleanup_service import SelectiveCleanupService

__all__ = [
    "ItemStore",
    "ManifestStore",
    "SelectiveCleanupService",
    "apply_manifest_counts",
]
