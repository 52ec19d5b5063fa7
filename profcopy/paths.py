"""
Path helpers for profile DATABASE folders and the backup directory.

A profile keeps its data files in a DATABASE folder:

    {database root}/
        DATABASE/                  - Global profile data files
        profiles/{Name}/DATABASE/  - Named profile data files
"""

import os
from pathlib import Path
from typing import Optional, Union

BACKUP_DIR_ENV_VAR = "PROFCOPY_BACKUP_DIR"
DATABASE_FOLDER_NAME = "DATABASE"

PathLike = Union[str, Path]


def get_backup_directory() -> Path:
    """
    Resolve the process-wide backup directory.

    Resolution order: the ``PROFCOPY_BACKUP_DIR`` environment variable, then
    ``%LOCALAPPDATA%/ProfCopy/Backups`` when ``LOCALAPPDATA`` is set, then
    ``~/.local/share/profcopy/backups``. The directory is not created here.

    Returns:
        Path: The backup directory.
    """
    override = os.environ.get(BACKUP_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()

    local_app_data = os.environ.get("LOCALAPPDATA")
    if local_app_data:
        return Path(local_app_data) / "ProfCopy" / "Backups"

    return Path.home() / ".local" / "share" / "profcopy" / "backups"


def ensure_directory_exists(path: PathLike) -> Path:
    """Create ``path`` (and parents) if it does not exist and return it as a Path."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_profile_database_path(profile_path: PathLike) -> Path:
    """DATABASE subfolder of a profile folder."""
    return Path(profile_path) / DATABASE_FOLDER_NAME


def get_data_file_path(database_path: PathLike, file_name: str) -> Path:
    """Full path of a data file inside a DATABASE folder."""
    return Path(database_path) / file_name


def data_file_exists(database_path: Optional[PathLike], file_name: str) -> bool:
    """Check whether a data file exists in a DATABASE folder."""
    if not database_path:
        return False
    return get_data_file_path(database_path, file_name).is_file()
