"""
PathSync sync manager.

Reconciles a local and a remote backend over a folder scope. A pass lists
both sides, unions the paths it saw, and reconciles each path on its own:
a missing entry is copied across, and when both sides hold different items
the remote item overwrites the local one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic

from pathsync.backends.base import StorageBackend, T
from pathsync.core.config import SyncConfig
from pathsync.core.logging import OperationLogger, get_logger
from pathsync.core.paths import Depth, FilePath, FolderPath
from pathsync.sync.exceptions import SyncAbortedError

logger = get_logger(__name__)


class SyncAction(Enum):
    """What reconciling one path did."""

    UNCHANGED = "unchanged"
    PULLED = "pulled"
    PUSHED = "pushed"
    OVERWRITTEN = "overwritten"
    VANISHED = "vanished"


@dataclass
class SyncConflict:
    path: str
    reason: str = "content_mismatch"
    resolution: str = "remote_wins"


@dataclass
class SyncSummary:
    pulled: int = 0
    pushed: int = 0
    overwritten: int = 0
    unchanged: int = 0
    vanished: int = 0
    errors: int = 0

    def record(self, action: SyncAction) -> None:
        setattr(self, action.value, getattr(self, action.value) + 1)

    @property
    def written(self) -> int:
        return self.pulled + self.pushed + self.overwritten

    def to_dict(self) -> dict[str, int]:
        return {
            "pulled": self.pulled,
            "pushed": self.pushed,
            "overwritten": self.overwritten,
            "unchanged": self.unchanged,
            "vanished": self.vanished,
            "errors": self.errors,
        }


@dataclass
class SyncStatus:
    local: str
    remote: str
    scope: str
    depth: str
    failure_policy: str
    started_at: datetime
    ended_at: datetime | None = None
    candidates: int = 0
    summary: SyncSummary = field(default_factory=SyncSummary)
    conflicts: list[SyncConflict] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.ended_at is not None and not self.errors

    @property
    def duration_seconds(self) -> float | None:
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, object]:
        return {
            "local": self.local,
            "remote": self.remote,
            "scope": self.scope,
            "depth": self.depth,
            "failure_policy": self.failure_policy,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "success": self.success,
            "candidates": self.candidates,
            "summary": self.summary.to_dict(),
            "conflicts": [
                {
                    "path": conflict.path,
                    "reason": conflict.reason,
                    "resolution": conflict.resolution,
                }
                for conflict in self.conflicts
            ],
            "errors": self.errors,
        }


class SyncDb(Generic[T]):
    """
    Synchronizes a local and a remote backend.

    The engine keeps no state between passes. Backend calls are awaited one
    at a time; there is no transaction spanning the two backends, so an
    aborted or cancelled pass leaves every write it already applied in place.

    Under the ``"abort"`` failure policy the first backend error stops the
    pass with SyncAbortedError. Under ``"continue"`` the failed path is
    recorded in the status and the pass moves on. A failed listing always
    aborts.
    """

    def __init__(
        self,
        local: StorageBackend[T],
        remote: StorageBackend[T],
        config: SyncConfig | None = None,
    ) -> None:
        self._local = local
        self._remote = remote
        self.config = config or SyncConfig()

    @property
    def local(self) -> StorageBackend[T]:
        return self._local

    @property
    def remote(self) -> StorageBackend[T]:
        return self._remote

    async def sync_folder(
        self,
        depth: Depth | None = None,
        scope: FolderPath | None = None,
    ) -> SyncStatus:
        """Run one pass over every path under ``scope`` seen by either backend."""
        depth = depth or self.config.depth
        scope = scope if scope is not None else self.config.scope
        policy = self.config.failure_policy

        status = SyncStatus(
            local=self._local.name,
            remote=self._remote.name,
            scope=str(scope),
            depth=depth.value,
            failure_policy=policy,
            started_at=datetime.now(),
        )

        with OperationLogger(
            "sync pass",
            logger=logger,
            local=status.local,
            remote=status.remote,
            scope=status.scope,
            depth=status.depth,
            outcome=lambda: {"candidates": status.candidates, **status.summary.to_dict()},
        ):
            try:
                try:
                    paths = await self._discover(depth, scope)
                except Exception as exc:
                    status.errors.append(f"listing {scope}: {exc}")
                    status.summary.errors += 1
                    raise SyncAbortedError(f"Listing failed under {scope}: {exc}", status) from exc

                status.candidates = len(paths)
                for path in paths:
                    try:
                        action = await self.sync_file(path)
                    except Exception as exc:
                        status.errors.append(f"{path}: {exc}")
                        status.summary.errors += 1
                        if policy == "abort":
                            raise SyncAbortedError(f"Sync aborted at {path}: {exc}", status) from exc
                        logger.warning("Path not reconciled", path=str(path), error=str(exc))
                        continue

                    status.summary.record(action)
                    if action is SyncAction.OVERWRITTEN:
                        status.conflicts.append(SyncConflict(path=str(path)))
            finally:
                status.ended_at = datetime.now()

        return status

    async def sync_file(self, path: FilePath) -> SyncAction:
        """Reconcile a single path from fresh point lookups on both sides."""
        local_item = await self._local.get(path)
        remote_item = await self._remote.get(path)

        if local_item is not None and remote_item is not None:
            if local_item == remote_item:
                action = SyncAction.UNCHANGED
            else:
                # Remote is authoritative on divergence.
                await self._local.insert(path, remote_item)
                action = SyncAction.OVERWRITTEN
                logger.info(
                    "Conflict resolved",
                    path=str(path),
                    resolution="remote_wins",
                )
        elif local_item is not None:
            await self._remote.insert(path, local_item)
            action = SyncAction.PUSHED
        elif remote_item is not None:
            await self._local.insert(path, remote_item)
            action = SyncAction.PULLED
        else:
            action = SyncAction.VANISHED

        logger.debug("Path reconciled", path=str(path), action=action.value)
        return action

    async def _discover(self, depth: Depth, scope: FolderPath) -> list[FilePath]:
        local_entries = await self._local.list(depth, scope)
        remote_entries = await self._remote.list(depth, scope)
        return sorted({path for path, _ in local_entries} | {path for path, _ in remote_entries})


def run_sync(
    local: StorageBackend[T],
    remote: StorageBackend[T],
    depth: Depth | None = None,
    scope: FolderPath | None = None,
    config: SyncConfig | None = None,
) -> SyncStatus:
    """Run one pass to completion from synchronous code."""
    return asyncio.run(SyncDb(local, remote, config).sync_folder(depth, scope))
