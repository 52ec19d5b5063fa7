"""
Backup engine for profile DATABASE folders.

This module contains the BackupEngine class, which snapshots a directory tree
into a ZIP archive, restores such an archive over a directory, and prunes old
archives from the backup directory.
"""

import logging
import os
import shutil
import tempfile
import zipfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from profcopy import paths

# Configure module logger
logger = logging.getLogger('profcopy.backup')

DEFAULT_KEEP_COUNT = 10


class BackupEngine:
    """
    Creates, restores and prunes ZIP snapshots of DATABASE folders.

    Archives are written to a single backup directory and named
    ``Backup_<profile folder>_<yyyyMMdd_HHmmss>.zip``. Each archive holds one
    top-level folder named after the backed-up directory, containing its full
    recursive file tree.
    """

    ARCHIVE_PREFIX = "Backup_"
    ARCHIVE_EXTENSION = ".zip"
    TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
    RESTORE_TEMP_PREFIX = "profcopy_restore_"

    def __init__(self, backup_dir: Optional[Union[str, Path]] = None) -> None:
        """
        Create a BackupEngine.

        Parameters:
            backup_dir (Path | None): Directory holding backup archives. Defaults to
                the process-wide location from ``paths.get_backup_directory()``.
        """
        self.backup_dir = Path(backup_dir) if backup_dir else paths.get_backup_directory()

    def create_backup(self, source_dir: Union[str, Path]) -> Path:
        """
        Archive ``source_dir`` into the backup directory.

        The archive is named after the parent folder of ``source_dir`` (the
        profile folder for a DATABASE directory) and the current time with
        second resolution. Archives created within the same second overwrite
        each other. A partially written archive is left in place on failure.

        Parameters:
            source_dir (Path): Directory to back up.

        Returns:
            Path: Absolute path of the created archive.

        Raises:
            FileNotFoundError: If ``source_dir`` does not exist.
            NotADirectoryError: If ``source_dir`` is not a directory.
            OSError: If the archive cannot be written.
        """
        source = Path(source_dir).resolve()
        if not source.exists():
            raise FileNotFoundError(f"DATABASE folder not found: {source_dir}")
        if not source.is_dir():
            raise NotADirectoryError(f"Not a directory: {source_dir}")

        backup_dir = paths.ensure_directory_exists(self.backup_dir).resolve()
        archive_path = backup_dir / self._archive_name(source)

        # strict_timestamps=False clamps pre-1980 mtimes instead of raising
        with zipfile.ZipFile(
            archive_path, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False
        ) as archive:
            archive.write(source, arcname=source.name)
            for root, dirs, files in os.walk(source):
                root_path = Path(root)
                # Never archive the backup directory itself (or the archive being written)
                dirs[:] = sorted(d for d in dirs if (root_path / d).resolve() != backup_dir)
                for dirname in dirs:
                    dir_path = root_path / dirname
                    archive.write(dir_path, arcname=self._arcname(source, dir_path))
                for filename in sorted(files):
                    file_path = root_path / filename
                    if file_path.resolve() == archive_path:
                        continue
                    archive.write(file_path, arcname=self._arcname(source, file_path))

        logger.info(f"Backup created: {archive_path}")
        return archive_path

    def restore_backup(self, archive_path: Union[str, Path], target_dir: Union[str, Path]) -> int:
        """
        Overlay the contents of a backup archive onto ``target_dir``.

        The archive is extracted into a fresh scratch directory first. Every file
        under the archive's content root is then copied into ``target_dir`` at the
        same relative path, overwriting existing files and creating intermediate
        directories. Files in ``target_dir`` that are not in the archive are left
        alone. The scratch directory is removed on every exit path; failures to
        remove it are logged and ignored.

        Parameters:
            archive_path (Path): Archive produced by ``create_backup``.
            target_dir (Path): Directory to restore into.

        Returns:
            int: Number of files restored.

        Raises:
            FileNotFoundError: If the archive does not exist.
            zipfile.BadZipFile: If the archive is not a valid ZIP file.
            OSError: If a file cannot be written to ``target_dir``.
        """
        archive = Path(archive_path)
        if not archive.is_file():
            raise FileNotFoundError(f"Backup file not found: {archive_path}")

        target = Path(target_dir)
        scratch_dir = Path(tempfile.mkdtemp(prefix=self.RESTORE_TEMP_PREFIX))
        restored = 0

        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(scratch_dir)

            content_root = self._find_content_root(scratch_dir, target.name)

            for root, _dirs, files in os.walk(content_root):
                root_path = Path(root)
                for filename in files:
                    extracted_file = root_path / filename
                    dest_file = target / extracted_file.relative_to(content_root)
                    dest_file.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(extracted_file, dest_file)
                    restored += 1
        finally:
            try:
                shutil.rmtree(scratch_dir)
            except OSError as e:
                logger.warning(f"Could not remove restore scratch directory {scratch_dir}: {e}")

        logger.info(f"Restored {restored} file(s) from {archive} into {target}")
        return restored

    def clean_old_backups(self, keep_count: int = DEFAULT_KEEP_COUNT) -> int:
        """
        Delete all but the ``keep_count`` most recently created archives.

        Individual files that cannot be deleted are logged and skipped. Does
        nothing when the backup directory does not exist.

        Parameters:
            keep_count (int): Number of recent archives to keep.

        Returns:
            int: Number of archives deleted.

        Raises:
            ValueError: If ``keep_count`` is negative.
        """
        if keep_count < 0:
            raise ValueError(f"keep_count must be non-negative, got {keep_count}")

        archives = self.list_backups()
        deleted = 0

        for old_archive in archives[keep_count:]:
            try:
                old_archive.unlink()
                deleted += 1
                logger.debug(f"Removed old backup: {old_archive}")
            except OSError as e:
                logger.warning(f"Could not remove old backup {old_archive}: {e}")

        if deleted:
            logger.info(f"Pruned {deleted} old backup(s) from {self.backup_dir}")
        return deleted

    def list_backups(self) -> List[Path]:
        """
        List archives in the backup directory, newest first.

        Returns:
            List[Path]: Archive paths ordered by creation time descending, with the
                file name (which embeds the timestamp) as tie-breaker. Empty when
                the backup directory does not exist.
        """
        if not self.backup_dir.is_dir():
            return []

        pattern = f"{self.ARCHIVE_PREFIX}*{self.ARCHIVE_EXTENSION}"
        entries = []
        for archive in self.backup_dir.glob(pattern):
            try:
                if archive.is_file():
                    entries.append((self._creation_time(archive), archive.name, archive))
            except OSError as e:
                logger.warning(f"Could not stat backup {archive}: {e}")

        entries.sort(key=lambda entry: (entry[0], entry[1]), reverse=True)
        return [archive for _, _, archive in entries]

    def _archive_name(self, source: Path) -> str:
        """Build the archive file name for ``source``."""
        profile_name = source.parent.name or "Unknown"
        timestamp = datetime.now().strftime(self.TIMESTAMP_FORMAT)
        return f"{self.ARCHIVE_PREFIX}{profile_name}_{timestamp}{self.ARCHIVE_EXTENSION}"

    @staticmethod
    def _arcname(source: Path, path: Path) -> str:
        """Archive member name for ``path``, rooted at a folder named like ``source``."""
        return (Path(source.name) / path.relative_to(source)).as_posix()

    @staticmethod
    def _find_content_root(extracted_dir: Path, target_name: str) -> Path:
        """
        Locate the backed-up folder inside an extracted archive.

        Archives from ``create_backup`` hold one top-level folder named after the
        backed-up directory, normally ``DATABASE``. A top-level folder is only
        stripped when it carries that name or the name of the restore target;
        any other layout is restored from the extraction root as-is.
        """
        for name in (target_name, paths.DATABASE_FOLDER_NAME):
            if name and (extracted_dir / name).is_dir():
                return extracted_dir / name
        return extracted_dir

    @staticmethod
    def _creation_time(path: Path) -> float:
        stat = path.stat()
        birthtime = getattr(stat, "st_birthtime", None)
        if birthtime is not None:
            return birthtime
        # On Windows st_ctime is the creation time; elsewhere it is the inode change time
        if os.name == "nt":
            return stat.st_ctime
        return stat.st_mtime
