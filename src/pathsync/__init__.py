"""
PathSync - Two-way synchronization of path-addressed key/value stores.

Reconciles a local and a remote store over a folder scope, copying
missing entries across and letting the remote side win on divergence.
"""

__version__ = "0.2.0"
__author__ = "PathSync Team"

from pathsync.backends import MemoryBackend, StorageBackend
from pathsync.core.config import PathSyncConfig
from pathsync.core.paths import Depth, FilePath, FolderPath, MissingFileName
from pathsync.sync import SyncAbortedError, SyncDb

__all__ = [
    "Depth",
    "FilePath",
    "FolderPath",
    "MemoryBackend",
    "MissingFileName",
    "PathSyncConfig",
    "StorageBackend",
    "SyncAbortedError",
    "SyncDb",
    "__version__",
]
