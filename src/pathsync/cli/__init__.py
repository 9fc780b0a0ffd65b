"""
PathSync CLI Module.

Provides command-line interface for PathSync operations.
"""

from pathsync.cli.main import main, cli

__all__ = ["main", "cli"]
