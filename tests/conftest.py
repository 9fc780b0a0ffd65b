"""
Pytest configuration and fixtures for PathSync tests.
"""

import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pathsync.backends import MemoryBackend  # noqa: E402
from pathsync.core.paths import FilePath  # noqa: E402


def _seed(backend: MemoryBackend, entries: dict[str, object]) -> MemoryBackend:
    for key, item in entries.items():
        backend.insert_blocking(FilePath.parse(key), item)
    return backend


@pytest.fixture
def seed():
    """Insert slash-separated path entries into a backend."""
    return _seed


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_backend() -> MemoryBackend:
    return MemoryBackend(name="local")


@pytest.fixture
def remote_backend() -> MemoryBackend:
    return MemoryBackend(name="remote")


@pytest.fixture
def sample_config() -> Generator["PathSyncConfig", None, None]:
    """Create a sample configuration for testing."""
    from pathsync.core.config import LoggingConfig, PathSyncConfig

    with tempfile.TemporaryDirectory() as tmpdir:
        config = PathSyncConfig(
            logging=LoggingConfig(log_directory=Path(tmpdir) / "logs"),
        )
        config.ensure_directories()
        yield config


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")
