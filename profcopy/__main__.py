"""Allow ``python -m profcopy``."""

from profcopy.cli import app

app()
