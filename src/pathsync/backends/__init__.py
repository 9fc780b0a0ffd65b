"""
PathSync Storage Backends.

Every store taking part in synchronization implements StorageBackend.
Backends are chosen when the engine is composed, not by inheritance
from one another.
"""

from __future__ import annotations

from typing import Any

from pathsync.backends.base import BlockingBackend, StorageBackend
from pathsync.backends.memory import MemoryBackend, ReadWriteLock


def get_backend(kind: str = "memory", **options: Any) -> StorageBackend[Any]:
    """Create a backend by kind name."""
    kind = kind.lower()

    if kind == "memory":
        return MemoryBackend(**options)
    raise ValueError(f"Unsupported backend: {kind}")


__all__ = [
    "StorageBackend",
    "BlockingBackend",
    "MemoryBackend",
    "ReadWriteLock",
    "get_backend",
]
