"""CopyOrchestrator for running a profile data copy as a pseudo-transaction.

This module provides the CopyOrchestrator class, which validates a copy
request, snapshots the target DATABASE folder, copies each selected data file
from the source profile, reports progress, and restores the snapshot when the
copy phase fails.

Example:
    from profcopy.orchestration import CopyOrchestrator
    from profcopy.models import MergeOptions

    orchestrator = CopyOrchestrator(progress_callback=print)
    result = orchestrator.copy_data(source_profile, target_db, MergeOptions(
        selected_data_types=selections,
    ))
    print(result.get_summary())
"""

import logging
import shutil
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from profcopy import paths
from profcopy.models import (
    CopyProgress,
    CopyResult,
    DataTypeSelection,
    MergeOptions,
    ProfileInfo,
)
from profcopy.operations import BackupEngine

logger = logging.getLogger('profcopy.copy')

ProgressCallback = Callable[[CopyProgress], None]

INVALID_SOURCE_MESSAGE = "Invalid source profile."
TARGET_NOT_FOUND_MESSAGE = "Target DATABASE folder not found."
NOTHING_SELECTED_MESSAGE = "No data types selected for copying."
RESTORED_NOTE = "The backup has been restored automatically."


class CopyOrchestrator:
    """Copies selected data files between profile DATABASE folders.

    One call to ``copy_data`` runs the full sequence: validate, optionally back
    up the target, copy each selected file in the caller's order, and on a
    copy-phase failure restore the backup. Every outcome is returned as a
    CopyResult; ``copy_data`` does not raise for filesystem conditions.

    Calls are synchronous and hold no state between them. Concurrent calls
    against the same target folder are not coordinated; callers must run one
    copy per target at a time.

    Attributes:
        backup_engine: Engine used for snapshot, restore and pruning.
        progress_callback: Optional observer invoked synchronously with a
            CopyProgress at each step.
    """

    def __init__(
        self,
        backup_engine: Optional[BackupEngine] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        """Initialize the CopyOrchestrator.

        Args:
            backup_engine: BackupEngine to use. Defaults to one writing to the
                process-wide backup directory.
            progress_callback: Optional function receiving CopyProgress updates.
        """
        self.backup_engine = backup_engine or BackupEngine()
        self.progress_callback = progress_callback

    def copy_data(
        self,
        source_profile: Optional[ProfileInfo],
        target_dir: Union[str, Path, None],
        options: MergeOptions,
    ) -> CopyResult:
        """Copy the selected data files from ``source_profile`` into ``target_dir``.

        Args:
            source_profile: Profile to copy from.
            target_dir: DATABASE folder of the profile to copy into.
            options: Backup preference and ordered data type selections.

        Returns:
            CopyResult describing the outcome. ``duration`` is always set.
        """
        start_time = time.monotonic()
        result = CopyResult()

        error = self._validate(source_profile, target_dir)
        selected = self._effective_selection(options)
        if error is None and not selected:
            error = NOTHING_SELECTED_MESSAGE
        if error is not None:
            logger.warning(f"Copy rejected: {error}")
            return self._finish(result, start_time, error_message=error)

        target = Path(target_dir)
        source_db = Path(source_profile.database_path)

        start_step = 1 if options.create_backup else 0
        total_steps = len(selected) + start_step

        # Step 1: snapshot the target
        if options.create_backup:
            try:
                self._report_progress("Creating backup of current DATABASE folder...", 0, total_steps)
                result.backup_path = str(self.backup_engine.create_backup(target))
                self.backup_engine.clean_old_backups()
                self._report_progress(
                    f"Backup created: {Path(result.backup_path).name}", 1, total_steps
                )
            except Exception as e:
                logger.error(f"Backup failed, nothing copied: {e}")
                return self._finish(
                    result, start_time, error_message=f"Failed to create backup: {e}"
                )

        # Step 2: copy each selected file
        try:
            for index, selection in enumerate(selected):
                self._report_progress(
                    f"Copying {selection.display_name} ({selection.file_name})...",
                    start_step + index,
                    total_steps,
                )
                self._copy_selection(selection, source_db, target, result)

            result.success = True
            self._report_progress("Copy complete.", total_steps, total_steps)
        except Exception as e:
            logger.exception(f"Error during copy into {target}")
            result.success = False
            result.error_message = f"Error during copy: {e}"

            if result.backup_path:
                self._restore_after_failure(result, target)

        return self._finish(result, start_time)

    def _validate(
        self, source_profile: Optional[ProfileInfo], target_dir: Union[str, Path, None]
    ) -> Optional[str]:
        """Return the validation error message, or None when the request is valid."""
        if source_profile is None or not source_profile.is_valid():
            return INVALID_SOURCE_MESSAGE

        # Path("") resolves to the current directory, so reject empty input first.
        if not target_dir or not Path(target_dir).is_dir():
            return TARGET_NOT_FOUND_MESSAGE

        return None

    @staticmethod
    def _effective_selection(options: MergeOptions) -> List[DataTypeSelection]:
        """Selections that are both selected and available, in caller order."""
        return [
            selection
            for selection in options.selected_data_types
            if selection.is_selected and selection.is_available
        ]

    def _copy_selection(
        self,
        selection: DataTypeSelection,
        source_db: Path,
        target: Path,
        result: CopyResult,
    ) -> None:
        """Copy one data file, or record it as skipped when the source lacks it."""
        source_path = paths.get_data_file_path(source_db, selection.file_name)
        target_path = paths.get_data_file_path(target, selection.file_name)

        if source_path.is_file():
            self._copy_file(source_path, target_path)
            result.copied_files.append(selection.file_name)
            logger.debug(f"Copied: {selection.file_name}")
        else:
            result.skipped_files.append(selection.file_name)
            logger.debug(f"Skipped (not in source): {selection.file_name}")

    def _copy_file(self, source: Path, dest: Path) -> None:
        """Copy a file over ``dest``, preserving metadata."""
        shutil.copy2(source, dest)

    def _restore_after_failure(self, result: CopyResult, target: Path) -> None:
        """Restore the pre-copy snapshot and annotate the result with the outcome."""
        try:
            self._report_progress("Error occurred. Restoring from backup...", 0, 1)
            self.backup_engine.restore_backup(result.backup_path, target)
            self._report_progress("Backup restored successfully.", 1, 1)
            result.restored = True
            result.error_message += f"\n\n{RESTORED_NOTE}"
            logger.info(f"Restored {target} from {result.backup_path}")
        except Exception as restore_error:
            result.restored = False
            result.error_message += (
                f"\n\nWARNING: Failed to restore backup: {restore_error}"
                f"\nBackup file is at: {result.backup_path}"
            )
            logger.critical(
                f"Automatic restore failed for {target}; backup remains at {result.backup_path}: "
                f"{restore_error}"
            )

    def _report_progress(self, message: str, current: int, total: int) -> None:
        """Notify the progress observer, if any. Observer errors are logged only."""
        if self.progress_callback is None:
            return

        try:
            self.progress_callback(CopyProgress(message=message, current=current, total=total))
        except Exception as e:
            logger.warning(f"Progress callback raised: {e}")

    @staticmethod
    def _finish(result: CopyResult, start_time: float, error_message: Optional[str] = None) -> CopyResult:
        """Stamp the duration (and a failure message, if given) onto ``result``."""
        if error_message is not None:
            result.success = False
            result.error_message = error_message
        result.duration = max(0.0, time.monotonic() - start_time)
        return result
