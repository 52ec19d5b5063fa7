"""Persistence for profile manifests.

A manifest lists, per data type, the named items present in a profile. It is
saved as ``.fabmanifest.json`` inside the profile's DATABASE folder.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from profcopy.manifest.item_store import ItemStore
from profcopy.models import DataTypeDescriptor, DataTypeSelection, ProfileManifest
from profcopy.registry import get_all_descriptors

logger = logging.getLogger('profcopy.manifest')


class ManifestStore:
    """Generates, saves and loads ProfileManifest files."""

    MANIFEST_FILE_NAME = ".fabmanifest.json"
    DEFAULT_PROFILE_NAME = "Global"

    def get_manifest_path(self, database_path: Union[str, Path]) -> Path:
        return Path(database_path) / self.MANIFEST_FILE_NAME

    def has_manifest(self, database_path: Union[str, Path]) -> bool:
        return self.get_manifest_path(database_path).is_file()

    def generate_manifest(
        self,
        database_path: Union[str, Path],
        profile_name: Optional[str],
        item_store: ItemStore,
        descriptors: Optional[Iterable[DataTypeDescriptor]] = None,
    ) -> ProfileManifest:
        """Enumerate the item store and save the resulting manifest.

        Only enumerable descriptors with a manifest key are listed. A data type
        whose enumeration fails is logged and left out; empty collections are
        left out too.

        Args:
            database_path: DATABASE folder the manifest describes and is saved in.
            profile_name: Profile name; defaults to "Global".
            item_store: Source of the items per manifest key.
            descriptors: Catalog to enumerate; defaults to the full registry.

        Returns:
            The saved ProfileManifest.

        Raises:
            OSError: If the manifest file cannot be written.
        """
        manifest = ProfileManifest(
            profile_name=profile_name or self.DEFAULT_PROFILE_NAME,
            database_path=str(database_path),
            generated_at=datetime.now(),
        )

        if descriptors is None:
            descriptors = get_all_descriptors()

        for descriptor in descriptors:
            key = descriptor.manifest_key
            if not descriptor.is_enumerable or not key:
                continue
            try:
                items = list(item_store.list_items(key))
            except Exception as e:
                logger.warning(f"Could not enumerate {key} for manifest: {e}")
                continue
            if items:
                manifest.data_types[key] = items

        self.save_manifest(manifest, database_path)
        return manifest

    def save_manifest(self, manifest: ProfileManifest, database_path: Union[str, Path]) -> Path:
        """Write ``manifest`` as indented UTF-8 JSON and return its path."""
        path = self.get_manifest_path(database_path)
        path.write_text(json.dumps(manifest.to_dict(), indent=2), encoding="utf-8")
        logger.debug(f"Manifest saved: {path}")
        return path

    def load_manifest(self, database_path: Union[str, Path]) -> Optional[ProfileManifest]:
        """Load the manifest from ``database_path``.

        Returns:
            The manifest, or None when it is missing or cannot be parsed.
        """
        path = self.get_manifest_path(database_path)
        if not path.is_file():
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return ProfileManifest.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable manifest {path}: {e}")
            return None


def apply_manifest_counts(
    selections: Sequence[DataTypeSelection], manifest: Optional[ProfileManifest]
) -> None:
    """Set ``manifest_item_count`` on each selection from ``manifest``."""
    for selection in selections:
        key = selection.descriptor.manifest_key
        if (
            manifest is not None
            and selection.descriptor.is_enumerable
            and key
            and key in manifest.data_types
        ):
            selection.manifest_item_count = len(manifest.data_types[key])
        else:
            selection.manifest_item_count = None
