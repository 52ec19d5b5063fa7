"""Terminal User Interface for profile data copying.

This module provides the CopyTUI class, a Rich-based presenter for the data
type catalog, copy progress and copy results.

Example:
    from profcopy.ui import CopyTUI

    tui = CopyTUI()
    tui.display_data_types(selections)
    progress, callback = tui.create_progress_callback()
    with progress:
        result = CopyOrchestrator(progress_callback=callback).copy_data(...)
    tui.display_copy_result(result)
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
)
from rich.prompt import Confirm
from rich.table import Table

from profcopy.models import CopyProgress, CopyResult, DataTypeSelection, PendingCleanup, ProfileInfo


class CopyTUI:
    """Rich-based presenter for copy operations.

    Args:
        console: Optional Rich Console instance for output. Pass a Console
            backed by StringIO to capture output in tests.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_data_types(self, selections: Sequence[DataTypeSelection], show_availability: bool = False) -> None:
        """Display the data type catalog grouped as registered.

        Args:
            selections: Selection records to list, in display order.
            show_availability: If True, add columns for source availability and
                manifest item counts.
        """
        table = Table(title="Data Types")
        table.add_column("Group", style="magenta")
        table.add_column("Name", style="white")
        table.add_column("File", style="cyan")
        table.add_column("Selective", justify="center")
        if show_availability:
            table.add_column("In Source", justify="center")
            table.add_column("Items", justify="right")

        previous_group = None
        for selection in selections:
            descriptor = selection.descriptor
            group = descriptor.group if descriptor.group != previous_group else ""
            previous_group = descriptor.group
            selective = "[green]yes[/green]" if descriptor.supports_selective_cleanup else ""
            row = [group, descriptor.display_name, descriptor.file_name, selective]
            if show_availability:
                row.append("[green]yes[/green]" if selection.is_available else "[dim]no[/dim]")
                if selection.manifest_item_count is None:
                    row.append("")
                else:
                    row.append(selection.selection_indicator or str(selection.manifest_item_count))
            table.add_row(*row)

        self.console.print(table)

    def confirm_copy(
        self,
        source_profile: ProfileInfo,
        target_dir: Path,
        selections: Sequence[DataTypeSelection],
        create_backup: bool,
    ) -> bool:
        """Show what is about to be copied and ask for confirmation."""
        chosen = [s for s in selections if s.is_selected and s.is_available]
        selective = [s for s in chosen if s.effective_selected_items is not None]

        lines = [
            f"This will copy {len(chosen)} data file(s) from:",
            f"  {source_profile.name}",
            f"  ({source_profile.database_path})",
            "",
            "To the DATABASE folder:",
            f"  {target_dir}",
            "",
        ]
        if create_backup:
            lines.append("A backup will be created first.")
        else:
            lines.append("[red]WARNING: No backup will be created![/red]")
        if selective:
            lines.append(
                f"{len(selective)} data type(s) have selective items - "
                "cleanup will run after restart."
            )
        lines.append("")
        lines.append("[yellow]The host application must be restarted after copying.[/yellow]")

        panel = Panel("\n".join(lines), title="Confirm Copy", border_style="yellow")
        self.console.print(panel)

        return Confirm.ask("Continue?", default=False, console=self.console)

    def create_progress_callback(self) -> tuple[Progress, Callable[[CopyProgress], None]]:
        """Create a progress bar and a callback that feeds it CopyProgress updates.

        The caller must use the returned Progress as a context manager around
        the copy so the bar renders and cleans up.

        Returns:
            tuple[Progress, Callable[[CopyProgress], None]]: The Progress and the
                callback to hand to CopyOrchestrator.
        """
        progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
        )
        task_id = progress.add_task("Preparing copy...", total=1)

        def callback(update: CopyProgress) -> None:
            progress.update(
                task_id,
                description=update.message,
                completed=update.current,
                total=max(update.total, 1),
            )

        return progress, callback

    def display_copy_result(self, result: CopyResult) -> None:
        """Display the outcome of a copy with files, backup and errors."""
        if result.success:
            title = "Copy Complete"
            border = "green"
        else:
            title = "Copy Failed"
            border = "red"

        table = Table(show_header=True, header_style="bold")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Files copied", f"{len(result.copied_files):,}")
        table.add_row("Files skipped (not in source)", f"{len(result.skipped_files):,}")
        table.add_row("Backup", result.backup_path or "[dim]none[/dim]")
        if result.restored is not None:
            table.add_row(
                "Automatic restore",
                "[green]succeeded[/green]" if result.restored else "[red]FAILED[/red]",
            )
        table.add_row("Duration", self._format_duration(result.duration))

        self.console.print(Panel(table, title=title, border_style=border))

        if result.copied_files:
            self.console.print("Copied: " + ", ".join(result.copied_files))
        if result.skipped_files:
            self.console.print("[dim]Skipped: " + ", ".join(result.skipped_files) + "[/dim]")

        if result.success:
            self.console.print(
                "[yellow]IMPORTANT: You must restart the host application "
                "for changes to take effect.[/yellow]"
            )
        else:
            self._display_errors(result.error_message.split("\n\n"))

    def display_pending_cleanup(self, cleanup: PendingCleanup) -> None:
        """Display the items queued for deletion after restart."""
        header = (
            f"Profile: {cleanup.profile_name}\n"
            f"DATABASE: {cleanup.database_path}\n"
            f"Created: {cleanup.created_at.strftime('%Y-%m-%d %H:%M:%S')}"
        )
        self.console.print(Panel(header, title="Pending Cleanup", border_style="blue"))

        table = Table(show_header=True, header_style="bold")
        table.add_column("Data Type", style="cyan")
        table.add_column("Items to delete", justify="right")
        table.add_column("Names", style="dim")
        for key, names in cleanup.items_to_delete.items():
            table.add_row(key, str(len(names)), self._truncate_name(", ".join(names), max_length=60))
        self.console.print(table)

    def display_backups(self, backups: List[Path]) -> None:
        """List backup archives, newest first."""
        if not backups:
            self.console.print("[yellow]No backups found.[/yellow]")
            return

        table = Table(title="Backups")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Archive", style="white")
        table.add_column("Size", justify="right")
        for idx, archive in enumerate(backups, start=1):
            try:
                size = self._format_size(archive.stat().st_size)
            except OSError:
                size = "?"
            table.add_row(str(idx), archive.name, size)
        self.console.print(table)

    def _display_errors(self, errors: List[str]) -> None:
        """Display error messages in a separate panel."""
        error_text = "\n".join(f"- {e.strip()}" for e in errors if e.strip())
        self.console.print(Panel(error_text, title="Error", border_style="red"))

    def _format_size(self, bytes_size: int) -> str:
        if bytes_size < 1024:
            return f"{bytes_size} B"
        elif bytes_size < 1024 * 1024:
            return f"{bytes_size / 1024:.1f} KB"
        elif bytes_size < 1024 * 1024 * 1024:
            return f"{bytes_size / (1024 * 1024):.1f} MB"
        else:
            return f"{bytes_size / (1024 * 1024 * 1024):.1f} GB"

    def _format_duration(self, seconds: float) -> str:
        """Format seconds as e.g. "2.4s" or "1m 5s"."""
        if seconds < 0:
            seconds = 0
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        if len(name) > max_length:
            return name[: max_length - 3] + "..."
        return name
