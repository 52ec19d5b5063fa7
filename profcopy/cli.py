"""
Profile Data Copy - CLI Interface.

A command-line interface for copying data files between profile DATABASE
folders with an automatic backup and rollback on failure.

Usage Examples:
    # List the copyable data types and which exist in a source profile
    python -m profcopy types --source /data/profiles/Shop/DATABASE

    # Copy services and materials from one profile to another
    python -m profcopy copy /data/profiles/Shop/DATABASE /data/DATABASE -t Services -t Materials

    # Copy everything, keep only two services after restart
    python -m profcopy copy SRC_DB DST_DB --all --keep-items "Services=Duct,Pipe"

    # Backup maintenance
    python -m profcopy backup /data/DATABASE
    python -m profcopy restore ~/.local/share/profcopy/backups/Backup_X_20240101_120000.zip /data/DATABASE
    python -m profcopy prune --keep 5
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from profcopy.manifest import ManifestStore, SelectiveCleanupService, apply_manifest_counts
from profcopy.models import DataTypeSelection, MergeOptions, ProfileInfo, ProfileManifest
from profcopy.operations import DEFAULT_KEEP_COUNT, BackupEngine
from profcopy.orchestration import CopyLogger, CopyOrchestrator
from profcopy.registry import (
    check_available_data_types,
    create_selections,
    find_descriptor,
    suggest_descriptor,
)
from profcopy.ui import CopyTUI
from profcopy import paths

__version__ = "0.1.0"

# Initialize Typer app
app = typer.Typer(
    name="profcopy",
    help="Profile Data Copy - Copy data files between profiles with backup and rollback.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()

BACKUP_DIR_OPTION_HELP = "Directory holding backup archives."


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"Profile Data Copy v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def validate_database_path(database_path: Path, label: str) -> None:
    """
    Validate that a DATABASE folder exists.

    Raises:
        typer.Exit: If validation fails, after printing an error message.
    """
    if not database_path.exists():
        console.print(f"[red]Error:[/red] {label} does not exist: {database_path}")
        raise typer.Exit(1)

    if not database_path.is_dir():
        console.print(f"[red]Error:[/red] {label} is not a directory: {database_path}")
        raise typer.Exit(1)


def profile_from_database_path(database_path: Path) -> ProfileInfo:
    """Build a ProfileInfo for a DATABASE folder, named after its parent folder."""
    resolved = database_path.resolve()
    return ProfileInfo(
        name=resolved.parent.name or "Global",
        path=resolved.parent,
        database_path=resolved,
    )


def unknown_type_error(name: str) -> typer.BadParameter:
    """Build the error for an unrecognised data type, with a suggestion when one is close."""
    message = f"Unknown data type '{name}'"
    suggestion = suggest_descriptor(name)
    if suggestion is not None:
        message += f". Did you mean '{suggestion.data_type.value}'?"
    return typer.BadParameter(message)


def parse_keep_items(values: Optional[List[str]]) -> Dict[str, List[str]]:
    """
    Parse ``--keep-items`` values of the form ``TYPE=name1,name2``.

    Returns:
        Mapping of manifest key to item names to keep.

    Raises:
        typer.BadParameter: If a value is malformed or names a data type that
            does not support selective cleanup.
    """
    result: Dict[str, List[str]] = {}
    for value in values or []:
        if "=" not in value:
            raise typer.BadParameter(f"Expected TYPE=name1,name2, got '{value}'")

        type_name, _, names = value.partition("=")
        descriptor = find_descriptor(type_name)
        if descriptor is None:
            raise unknown_type_error(type_name)
        if not descriptor.supports_selective_cleanup or not descriptor.manifest_key:
            raise typer.BadParameter(
                f"{descriptor.display_name} does not support selective item copy"
            )

        items = [name.strip() for name in names.split(",") if name.strip()]
        result.setdefault(descriptor.manifest_key, []).extend(items)
    return result


def build_selections(
    type_names: Optional[List[str]],
    select_all: bool,
    keep_items: Dict[str, List[str]],
) -> List[DataTypeSelection]:
    """
    Create selections in the order the user named them.

    ``--all`` selects the whole catalog in registry order. Data types named in
    ``keep_items`` are selected as well.

    Raises:
        typer.BadParameter: If a type name is unknown or nothing is selected.
    """
    selections = create_selections()
    by_type = {selection.data_type: selection for selection in selections}
    ordered: List[DataTypeSelection] = []

    if select_all:
        ordered = list(selections)
    for name in type_names or []:
        descriptor = find_descriptor(name)
        if descriptor is None:
            raise unknown_type_error(name)
        selection = by_type[descriptor.data_type]
        if selection not in ordered:
            ordered.append(selection)

    for selection in selections:
        key = selection.descriptor.manifest_key
        if key in keep_items:
            selection.selected_items = keep_items[key]
            if selection not in ordered:
                ordered.append(selection)

    if not ordered:
        raise typer.BadParameter("Select at least one data type with --type, or use --all.")

    for selection in ordered:
        selection.is_selected = True
    return ordered


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Profile Data Copy - Copy data files between profiles with backup and rollback."""
    pass


@app.command("types")
def list_types(
    source: Optional[Path] = typer.Option(
        None,
        "--source",
        "-s",
        help="Source DATABASE folder to check availability and manifest counts against.",
    ),
) -> None:
    """
    List the copyable data types.

    With --source, shows which data files exist in that DATABASE folder and,
    when the folder has a manifest, how many items each data type holds.
    """
    tui = CopyTUI(console=console)
    selections = create_selections()

    if source is None:
        tui.display_data_types(selections)
        return

    validate_database_path(source, "Source DATABASE folder")
    profile = profile_from_database_path(source)
    check_available_data_types(profile, selections)
    apply_manifest_counts(selections, ManifestStore().load_manifest(source))
    tui.display_data_types(selections, show_availability=True)


@app.command()
def copy(
    source: Path = typer.Argument(..., help="Source profile DATABASE folder."),
    target: Path = typer.Argument(..., help="Target profile DATABASE folder."),
    types: Optional[List[str]] = typer.Option(
        None,
        "--type",
        "-t",
        help="Data type to copy (name or file name). Repeat for several; order is kept.",
    ),
    select_all: bool = typer.Option(False, "--all", "-a", help="Copy every data type."),
    keep_items: Optional[List[str]] = typer.Option(
        None,
        "--keep-items",
        "-k",
        help="TYPE=name1,name2: keep only these items after restart. Repeatable.",
    ),
    no_backup: bool = typer.Option(
        False, "--no-backup", help="Skip the backup of the target (no rollback on failure)."
    ),
    backup_dir: Optional[Path] = typer.Option(
        None, "--backup-dir", envvar=paths.BACKUP_DIR_ENV_VAR, help=BACKUP_DIR_OPTION_HELP
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", "-l", help="Path for the operation log."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output."),
) -> None:
    """
    Copy selected data files from SOURCE into TARGET.

    The target is backed up first (unless --no-backup) and restored
    automatically if any file fails to copy. With --keep-items, the unwanted
    items are recorded in the target folder and removed after the host
    application restarts.
    """
    configure_logging(verbose)
    tui = CopyTUI(console=console)

    kept = parse_keep_items(keep_items)
    selections = build_selections(types, select_all, kept)

    source_profile = profile_from_database_path(source)
    check_available_data_types(source_profile, selections)
    manifest_store = ManifestStore()
    manifest = manifest_store.load_manifest(source) if source_profile.is_valid() else None
    apply_manifest_counts(selections, manifest)

    if source_profile.is_valid():
        missing = [s.file_name for s in selections if not s.is_available]
        if missing:
            console.print(f"[dim]Not in source, will be ignored: {', '.join(missing)}[/dim]")

    options = MergeOptions(create_backup=not no_backup, selected_data_types=selections)

    if not yes and source_profile.is_valid() and target.is_dir():
        if not tui.confirm_copy(source_profile, target, selections, options.create_backup):
            console.print("[yellow]Copy cancelled.[/yellow]")
            raise typer.Exit(1)

    copy_log: Optional[CopyLogger] = None
    if log_file:
        try:
            copy_log = CopyLogger(log_file)
            copy_log.open()
        except OSError as e:
            console.print(f"[red]Error:[/red] Failed to create log file: {e}")
            raise typer.Exit(1)

    try:
        orchestrator = CopyOrchestrator(backup_engine=BackupEngine(backup_dir))
        progress, on_progress = tui.create_progress_callback()

        if copy_log:
            copy_log.log_header()
            copy_log.log_options(source_profile, target, options.create_backup, selections)

            def callback(update):
                on_progress(update)
                copy_log.log_progress(update)

            orchestrator.progress_callback = callback
        else:
            orchestrator.progress_callback = on_progress

        with progress:
            result = orchestrator.copy_data(source_profile, target, options)

        if copy_log:
            copy_log.log_result(result)

        tui.display_copy_result(result)

        if result.success:
            _record_pending_cleanup(source_profile, target, selections, manifest)

        if log_file:
            console.print(f"\n[dim]Log written to: {log_file}[/dim]")

        if not result.success:
            raise typer.Exit(1)

    except KeyboardInterrupt:
        console.print("\n[yellow]Copy interrupted by user.[/yellow]")
        raise typer.Exit(130)

    finally:
        if copy_log:
            copy_log.close()


def _record_pending_cleanup(
    source_profile: ProfileInfo,
    target: Path,
    selections: List[DataTypeSelection],
    manifest: Optional[ProfileManifest],
) -> None:
    """Save the post-restart cleanup for selective copies, if any."""
    selective = [s for s in selections if s.effective_selected_items is not None]
    if not selective:
        return

    if manifest is None:
        console.print(
            "[yellow]Warning:[/yellow] Source has no manifest; "
            "selective items ignored and whole files were kept."
        )
        return

    cleanup_service = SelectiveCleanupService()
    cleanup = cleanup_service.build_pending_cleanup(
        source_profile.name, target, selective, manifest
    )
    if cleanup is None:
        return

    try:
        path = cleanup_service.save_pending_cleanup(cleanup, target)
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not save pending cleanup: {e}")
        raise typer.Exit(1)

    console.print(
        f"{len(cleanup.items_to_delete)} data type(s) have selective items - "
        f"cleanup will run after restart. [dim]({path})[/dim]"
    )


@app.command()
def backup(
    database: Path = typer.Argument(..., help="DATABASE folder to back up."),
    backup_dir: Optional[Path] = typer.Option(
        None, "--backup-dir", envvar=paths.BACKUP_DIR_ENV_VAR, help=BACKUP_DIR_OPTION_HELP
    ),
) -> None:
    """Create a ZIP backup of a DATABASE folder."""
    validate_database_path(database, "DATABASE folder")
    engine = BackupEngine(backup_dir)

    try:
        archive = engine.create_backup(database)
    except OSError as e:
        console.print(f"[red]Error:[/red] Failed to create backup: {e}")
        raise typer.Exit(1)

    console.print(f"[green]Backup created:[/green] {archive}")


@app.command()
def restore(
    archive: Path = typer.Argument(..., help="Backup archive to restore."),
    database: Path = typer.Argument(..., help="DATABASE folder to restore into."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """
    Restore a backup archive over a DATABASE folder.

    Files in the archive overwrite those in the folder; files not in the
    archive are kept.
    """
    if not archive.is_file():
        console.print(f"[red]Error:[/red] Backup file not found: {archive}")
        raise typer.Exit(1)

    if not yes:
        if not typer.confirm(f"Overwrite files in {database} from {archive.name}?", default=False):
            console.print("[yellow]Restore cancelled.[/yellow]")
            raise typer.Exit(1)

    try:
        count = BackupEngine().restore_backup(archive, database)
    except Exception as e:
        console.print(f"[red]Error:[/red] Failed to restore backup: {e}")
        raise typer.Exit(1)

    console.print(f"[green]Restored {count} file(s) into[/green] {database}")


@app.command()
def prune(
    keep: int = typer.Option(
        DEFAULT_KEEP_COUNT, "--keep", "-k", min=0, help="Number of recent backups to keep."
    ),
    backup_dir: Optional[Path] = typer.Option(
        None, "--backup-dir", envvar=paths.BACKUP_DIR_ENV_VAR, help=BACKUP_DIR_OPTION_HELP
    ),
) -> None:
    """Delete old backups, keeping the most recent ones."""
    engine = BackupEngine(backup_dir)
    deleted = engine.clean_old_backups(keep)
    console.print(f"Removed {deleted} old backup(s).")
    CopyTUI(console=console).display_backups(engine.list_backups())


@app.command()
def pending(
    target: Path = typer.Argument(..., help="Target DATABASE folder."),
) -> None:
    """Show the cleanup queued to run after the host application restarts."""
    validate_database_path(target, "Target DATABASE folder")
    cleanup = SelectiveCleanupService().load_pending_cleanup(target)
    if cleanup is None:
        console.print("[yellow]No pending cleanup.[/yellow]")
        return

    CopyTUI(console=console).display_pending_cleanup(cleanup)


if __name__ == "__main__":
    app()
