"""
Exceptions for sync operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathsync.sync.manager import SyncStatus


class SyncError(Exception):
    """Base exception for sync operations."""

    pass


class SyncAbortedError(SyncError):
    """
    A pass stopped on a backend failure.

    Writes applied before the failure stand; ``status`` reports them.
    """

    def __init__(self, message: str, status: SyncStatus | None = None) -> None:
        super().__init__(message)
        self.status = status
