"""Selective cleanup service.

A selective copy copies the whole data file, then records which items the
user did not want in a PendingCleanup file. After the host application
restarts, ``execute_pending_cleanup`` deletes those items through an ItemStore
and removes the file.

The record lives in the target DATABASE folder, or in the backup directory
when no folder is given.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from profcopy import paths
from profcopy.manifest.item_store import ItemStore
from profcopy.models import DataTypeSelection, PendingCleanup, ProfileManifest

logger = logging.getLogger('profcopy.cleanup')


class SelectiveCleanupService:
    """Builds, persists and executes PendingCleanup records."""

    CLEANUP_FILE_NAME = "_pending_cleanup.json"

    def __init__(self, backup_dir: Optional[Union[str, Path]] = None) -> None:
        """
        Parameters:
            backup_dir (Path | None): Directory for records saved without a
                DATABASE folder. Defaults to ``paths.get_backup_directory()``.
        """
        self.backup_dir = Path(backup_dir) if backup_dir else paths.get_backup_directory()

    def get_cleanup_file_path(self, database_path: Optional[Union[str, Path]] = None) -> Path:
        directory = Path(database_path) if database_path else self.backup_dir
        return directory / self.CLEANUP_FILE_NAME

    def has_pending_cleanup(self, database_path: Optional[Union[str, Path]] = None) -> bool:
        return self.get_cleanup_file_path(database_path).is_file()

    def build_pending_cleanup(
        self,
        profile_name: str,
        target_database_path: Union[str, Path],
        selections: Iterable[DataTypeSelection],
        manifest: ProfileManifest,
    ) -> Optional[PendingCleanup]:
        """
        Work out which items to delete after a selective copy.

        For each selection with an effective item allow-list whose manifest key
        is in ``manifest``, the items to delete are the manifest's items (in
        manifest order) that are not on the allow-list.

        Returns:
            PendingCleanup | None: The record, or None if nothing is to be deleted.
        """
        items_to_delete: Dict[str, List[str]] = {}

        for selection in selections:
            keep = selection.effective_selected_items
            key = selection.descriptor.manifest_key
            if keep is None or key not in manifest.data_types:
                continue

            keep_set = set(keep)
            to_delete = [name for name in manifest.item_names(key) if name not in keep_set]
            if to_delete:
                items_to_delete[key] = to_delete

        if not items_to_delete:
            return None

        return PendingCleanup(
            profile_name=profile_name,
            database_path=str(target_database_path),
            created_at=datetime.now(),
            items_to_delete=items_to_delete,
        )

    def save_pending_cleanup(
        self, cleanup: PendingCleanup, database_path: Optional[Union[str, Path]] = None
    ) -> Path:
        """Write ``cleanup`` as JSON and return the file path."""
        path = self.get_cleanup_file_path(database_path)
        paths.ensure_directory_exists(path.parent)
        path.write_text(json.dumps(cleanup.to_dict(), indent=2), encoding="utf-8")
        logger.info(f"Pending cleanup saved: {path}")
        return path

    def load_pending_cleanup(
        self, database_path: Optional[Union[str, Path]] = None
    ) -> Optional[PendingCleanup]:
        """Load the pending cleanup record, or None when missing or unreadable."""
        path = self.get_cleanup_file_path(database_path)
        if not path.is_file():
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return PendingCleanup.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable cleanup file {path}: {e}")
            return None

    def execute_pending_cleanup(
        self, item_store: ItemStore, database_path: Optional[Union[str, Path]] = None
    ) -> Optional[str]:
        """
        Delete the recorded items through ``item_store`` and remove the record.

        A failure on one data type is reported in the summary and does not stop
        the others. Removing the record file is best effort.

        Returns:
            str | None: A summary of the deletions, or None if there was no record.
        """
        cleanup = self.load_pending_cleanup(database_path)
        if cleanup is None:
            return None

        results: List[str] = []
        total_deleted = 0

        for key, names in cleanup.items_to_delete.items():
            if not names:
                continue
            try:
                deleted = self._delete_items(item_store, key, names)
                total_deleted += deleted
                results.append(f"{key}: deleted {deleted}/{len(names)}")
            except Exception as e:
                logger.error(f"Cleanup of {key} failed: {e}")
                results.append(f"{key}: ERROR - {e}")

        path = self.get_cleanup_file_path(database_path)
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove cleanup file {path}: {e}")

        summary = f"Selective cleanup complete: {total_deleted} item(s) deleted."
        if results:
            summary += "\n\n" + "\n".join(results)
        return summary

    @staticmethod
    def _delete_items(item_store: ItemStore, key: str, names: List[str]) -> int:
        """Delete the items of ``key`` whose names match ``names`` case-insensitively."""
        wanted = {name.casefold() for name in names}
        matches = [
            item.name for item in item_store.list_items(key)
            if item.name.casefold() in wanted
        ]
        if not matches:
            return 0

        deleted = item_store.delete_items(key, matches)
        if deleted > 0:
            item_store.save(key)
        return deleted
