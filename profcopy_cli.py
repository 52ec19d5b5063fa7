"""Profcopy CLI - Profile Data Copy Tool.

This module re-exports the CLI app from profcopy.cli for
`python profcopy_cli.py` usage.

Usage examples:
    # List data types available in a source profile
    profcopy types --source /path/to/profiles/Shop/DATABASE

    # Copy two data types with backup and rollback
    profcopy copy /path/to/profiles/Shop/DATABASE /path/to/DATABASE -t Services -t Materials

    # Keep the ten most recent backups
    profcopy prune --keep 10
"""

from profcopy.cli import app

if __name__ == "__main__":
    app()
