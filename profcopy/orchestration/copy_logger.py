"""CopyLogger for writing a sectioned log of a profile data copy.

This module provides the CopyLogger class that writes a plain-text operation
log with a header, the copy options, progress lines and the final result.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from profcopy.models import CopyProgress, CopyResult, DataTypeSelection, ProfileInfo


class CopyLogger:
    """Logger for copy operations with structured output format.

    Usage:
        with CopyLogger(log_file_path) as copy_log:
            copy_log.log_header()
            copy_log.log_options(source, target, create_backup, selections)
            orchestrator.progress_callback = copy_log.log_progress
            result = orchestrator.copy_data(source, target, options)
            copy_log.log_result(result)

    Write failures are reported on stderr and never interrupt the copy.

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(self, log_file_path: Optional[Path] = None) -> None:
        """Initialize the CopyLogger.

        Args:
            log_file_path: Optional path for the log file. If not provided,
                generates a timestamped filename in the current directory.

        Raises:
            OSError: If the log file's parent directory is missing or not writable.
        """
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None

        if log_file_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._log_file_path = Path.cwd() / f"copy_log_{timestamp_str}.log"
        else:
            self._log_file_path = Path(log_file_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the log file path is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._log_file_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            test_file = parent / f".profcopy_test_{id(self)}"
            test_file.touch()
            test_file.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def open(self) -> None:
        """Open the log file for writing.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        try:
            self._file_handle = open(self._log_file_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open log file for writing: {e}")

    def __enter__(self) -> "CopyLogger":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the log file if open."""
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing log file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_log_path(self) -> Path:
        return self._log_file_path

    def log_header(self) -> None:
        """Write the title and start timestamp."""
        self._write_separator()
        self._write_line("Profile Data Copy - Operation Log")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line("")

    def log_options(
        self,
        source_profile: Optional[ProfileInfo],
        target_dir: Path,
        create_backup: bool,
        selections: List[DataTypeSelection],
    ) -> None:
        """Write the copy request: source, target, backup flag and selected types."""
        self._write_separator()
        self._write_line("OPTIONS")
        self._write_separator()
        if source_profile is not None:
            self._write_line(f"Source profile: {source_profile.name}")
            self._write_line(f"Source DATABASE: {source_profile.database_path}")
        self._write_line(f"Target DATABASE: {target_dir}")
        self._write_line(f"Create backup: {'yes' if create_backup else 'no'}")

        chosen = [s for s in selections if s.is_selected]
        self._write_line(f"Selected data types: {len(chosen)}")
        for selection in chosen:
            line = f"- {selection.display_name} ({selection.file_name})"
            if selection.selection_indicator:
                line += f" {selection.selection_indicator}"
            if not selection.is_available:
                line += " [not available]"
            self._write_line(line, indent=2)
        self._write_line("")

    def log_progress(self, progress: CopyProgress) -> None:
        """Write one progress notification. Usable directly as a progress callback."""
        now = self._format_timestamp(datetime.now())
        self._write_line(f"[{now}] ({progress.current}/{progress.total}) {progress.message}")

    def log_result(self, result: CopyResult) -> None:
        """Write the result section."""
        self._write_line("")
        self._write_separator()
        self._write_line("RESULT")
        self._write_separator()
        self._write_line(f"Status: {'SUCCESS' if result.success else 'FAILED'}")
        self._write_line(f"Files copied: {len(result.copied_files)}")
        for name in result.copied_files:
            self._write_line(f"- {name}", indent=2)
        self._write_line(f"Files skipped (not in source): {len(result.skipped_files)}")
        for name in result.skipped_files:
            self._write_line(f"- {name}", indent=2)
        if result.backup_path:
            self._write_line(f"Backup: {result.backup_path}")
        if result.restored is not None:
            self._write_line(f"Automatic restore: {'succeeded' if result.restored else 'FAILED'}")
        if result.error_message:
            self._write_line("Error:")
            for line in result.error_message.splitlines():
                if line:
                    self._write_line(line, indent=2)
        self._write_line(f"Duration: {result.duration:.1f}s")
        self._write_line("")
        self._write_line(f"Log file: {self._log_file_path}")
        self._write_separator()

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line to the log file with optional indentation."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed log file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
            self._file_handle.flush()
        except OSError as e:
            print(f"Warning: Error writing to log file: {e}", file=sys.stderr)
