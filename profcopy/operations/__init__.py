"""Backup operations package for profcopy.

This package provides the BackupEngine class for snapshotting a DATABASE
folder into a ZIP archive, restoring it, and pruning old archives.

Example:
    >>> from profcopy.operations import BackupEngine
    >>> engine = BackupEngine()
    >>> archive = engine.create_backup(Path("/profiles/Shop/DATABASE"))
    >>> engine.restore_backup(archive, Path("/profiles/Shop/DATABASE"))
"""

from .backup_engine import DEFAULT_KEEP_COUNT, BackupEngine

__all__ = ["BackupEngine", "DEFAULT_KEEP_COUNT"]
