"""
PathSync Storage Backend Base.

Defines the abstract interface every key/value store must implement to
take part in synchronization.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pathsync.core.paths import Depth, FilePath, FolderPath

T = TypeVar("T")


class StorageBackend(ABC, Generic[T]):
    """
    Abstract base class for synchronizable stores.

    Every capability is a coroutine: a backend talking to a network or
    browser store may suspend at each call, and the engine awaits each one
    before issuing the next. ``None`` marks absence and is never stored.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name used in logs and reports."""

    @abstractmethod
    async def set(self, path: FilePath, item: T | None) -> T | None:
        """
        Store ``item`` at ``path``, or delete the entry when ``item`` is None.
        Returns whatever was stored at ``path`` before the call.
        """

    async def insert(self, path: FilePath, item: T) -> T | None:
        if item is None:
            raise ValueError("None marks absence; use remove() to delete an entry")
        return await self.set(path, item)

    async def remove(self, path: FilePath) -> T | None:
        return await self.set(path, None)

    @abstractmethod
    async def get(self, path: FilePath) -> T | None:
        """Point lookup. None means nothing is stored at exactly ``path``."""

    @abstractmethod
    async def list(self, depth: Depth, scope: FolderPath) -> list[tuple[FilePath, T]]:
        """
        List every entry whose folder satisfies ``depth`` relative to ``scope``.
        Order is unspecified.
        """


class BlockingBackend(StorageBackend[T]):
    """
    Backend whose operations complete without suspending.

    Subclasses implement the ``*_blocking`` methods; the coroutine contract
    delegates to them, so the same instance can be driven by the engine and
    used directly from synchronous code.
    """

    @abstractmethod
    def set_blocking(self, path: FilePath, item: T | None) -> T | None:
        """Synchronous form of set()."""

    @abstractmethod
    def get_blocking(self, path: FilePath) -> T | None:
        """Synchronous form of get()."""

    @abstractmethod
    def list_blocking(self, depth: Depth, scope: FolderPath) -> list[tuple[FilePath, T]]:
        """Synchronous form of list()."""

    def insert_blocking(self, path: FilePath, item: T) -> T | None:
        if item is None:
            raise ValueError("None marks absence; use remove_blocking() to delete an entry")
        return self.set_blocking(path, item)

    def remove_blocking(self, path: FilePath) -> T | None:
        return self.set_blocking(path, None)

    async def set(self, path: FilePath, item: T | None) -> T | None:
        return self.set_blocking(path, item)

    async def get(self, path: FilePath) -> T | None:
        return self.get_blocking(path)

    async def list(self, depth: Depth, scope: FolderPath) -> list[tuple[FilePath, T]]:
        return self.list_blocking(depth, scope)
