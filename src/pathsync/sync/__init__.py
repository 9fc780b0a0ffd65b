"""
PathSync sync module.

Provides two-way reconciliation between a local and a remote backend.
"""

from pathsync.sync.exceptions import SyncAbortedError, SyncError
from pathsync.sync.manager import (
    SyncAction,
    SyncConflict,
    SyncDb,
    SyncStatus,
    SyncSummary,
    run_sync,
)

__all__ = [
    "SyncAbortedError",
    "SyncAction",
    "SyncConflict",
    "SyncDb",
    "SyncError",
    "SyncStatus",
    "SyncSummary",
    "run_sync",
]
