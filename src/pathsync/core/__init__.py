"""
PathSync Core.

Contains the path model, configuration and logging shared by the
backends and the synchronization engine.
"""

from pathsync.core.config import PathSyncConfig, SyncConfig, LoggingConfig
from pathsync.core.logging import get_logger, setup_logging
from pathsync.core.paths import Depth, FilePath, FolderPath, MissingFileName, PathError

__all__ = [
    "PathSyncConfig",
    "SyncConfig",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "Depth",
    "FilePath",
    "FolderPath",
    "MissingFileName",
    "PathError",
]
