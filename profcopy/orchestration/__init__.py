"""Copy orchestration package for profcopy.

This package contains the components that run a copy operation:
- CopyOrchestrator: Validate, back up, copy and roll back on failure.
- CopyLogger: Structured operation log written to a timestamped file.
"""

from profcopy.orchestration.copy_logger import CopyLogger
from profcopy.orchestration.copy_orchestrator import CopyOrchestrator, ProgressCallback

__all__ = ["CopyLogger", "CopyOrchestrator", "ProgressCallback"]
