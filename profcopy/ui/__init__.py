"""Terminal presentation for profcopy."""

from .copy_tui import CopyTUI

__all__ = ["CopyTUI"]
