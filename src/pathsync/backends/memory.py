"""
PathSync in-memory backend.

A dictionary-backed store guarded by a multi-reader/single-writer lock.
Items are deep-copied on the way in and on the way out, so no caller ever
holds a live reference into the backend's storage.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pathsync.backends.base import BlockingBackend, T
from pathsync.core.logging import get_logger
from pathsync.core.paths import Depth, FilePath, FolderPath, PathError

logger = get_logger(__name__)


class ReadWriteLock:
    """Lock allowing concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MemoryBackend(BlockingBackend[T]):
    """Reference backend keeping items in a process-local dictionary."""

    def __init__(
        self,
        items: Mapping[FilePath, T] | None = None,
        name: str = "memory",
    ) -> None:
        self._name = name
        self._lock = ReadWriteLock()
        self._items: dict[FilePath, T] = {}
        for path, item in (items or {}).items():
            self.insert_blocking(path, item)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "memory") -> MemoryBackend[Any]:
        """
        Build a backend from slash-separated path strings, e.g. ``{"a/b": 1}``.

        Keys must be canonical (no leading, trailing or doubled slashes) so
        that to_dict() gives back the keys that came in. Raises PathError
        otherwise.
        """
        backend: MemoryBackend[Any] = cls(name=name)
        sources: dict[FilePath, str] = {}
        for key, item in data.items():
            path = FilePath.parse(key)
            if path in sources:
                raise PathError(f"Keys {sources[path]!r} and {key!r} name the same path")
            if path.key != key:
                raise PathError(f"Key {key!r} is not canonical, expected {path.key!r}")
            sources[path] = key
            backend.insert_blocking(path, item)
        return backend

    @property
    def name(self) -> str:
        return self._name

    def set_blocking(self, path: FilePath, item: T | None) -> T | None:
        stored = copy.deepcopy(item)
        with self._lock.write_locked():
            if stored is None:
                previous = self._items.pop(path, None)
            else:
                previous = self._items.get(path)
                self._items[path] = stored
        logger.debug(
            "Entry written" if item is not None else "Entry removed",
            backend=self._name,
            path=str(path),
        )
        return previous

    def get_blocking(self, path: FilePath) -> T | None:
        with self._lock.read_locked():
            return copy.deepcopy(self._items.get(path))

    def list_blocking(self, depth: Depth, scope: FolderPath) -> list[tuple[FilePath, T]]:
        with self._lock.read_locked():
            return [
                (path, copy.deepcopy(item))
                for path, item in self._items.items()
                if depth.includes(scope, path.folder)
            ]

    def to_dict(self) -> dict[str, T]:
        """Snapshot of every entry keyed by path string, sorted by path."""
        entries = self.list_blocking(Depth.RECURSIVE, FolderPath.root())
        return {path.key: item for path, item in sorted(entries, key=lambda e: e[0])}

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._items)

    def __contains__(self, path: object) -> bool:
        with self._lock.read_locked():
            return path in self._items

    def __repr__(self) -> str:
        return f"MemoryBackend(name={self._name!r}, entries={len(self)})"
