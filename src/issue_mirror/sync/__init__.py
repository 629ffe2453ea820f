"""Issue synchronization.

This module provides:
- SyncEngine: Full, incremental and lazy sync with progress and cancellation
- SyncResult, SyncProgress: Run outcome and progress events
- AutoSyncScheduler, SyncContext: Owned periodic sync handle
"""

from .engine import SyncEngine, SyncRunState
from .exceptions import IssueSyncError, SyncInProgressError
from .progress import ProgressCallback, SyncProgress
from .results import SyncResult
from .scheduler import AutoSyncScheduler, SyncContext

__all__ = [
    # Engine
    "SyncEngine",
    "SyncRunState",
    # Results
    "ProgressCallback",
    "SyncProgress",
    "SyncResult",
    # Exceptions
    "IssueSyncError",
    "SyncInProgressError",
    # Auto-sync
    "AutoSyncScheduler",
    "SyncContext",
]
