"""
PathSync configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from pathsync.core.paths import Depth, FolderPath

DEFAULT_CONFIG_PATH = Path.home() / ".pathsync" / "config.json"


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_enabled: bool = False
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / ".pathsync" / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class SyncConfig(BaseModel):
    """Configuration for synchronization passes."""

    failure_policy: Literal["abort", "continue"] = "abort"
    default_depth: Literal["simple", "recursive"] = "recursive"
    default_scope: str = ""

    @field_validator("default_scope", mode="before")
    @classmethod
    def normalize_scope(cls, v: str | None) -> str:
        if not v:
            return ""
        return "/".join(part for part in str(v).split("/") if part)

    @property
    def depth(self) -> Depth:
        return Depth.from_string(self.default_depth)

    @property
    def scope(self) -> FolderPath:
        return FolderPath.parse(self.default_scope)


class PathSyncConfig(BaseModel):
    """Main PathSync configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> PathSyncConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        if self.logging.file_enabled:
            self.logging.log_directory.mkdir(parents=True, exist_ok=True)


def get_default_config() -> PathSyncConfig:
    """Get the default configuration."""
    return PathSyncConfig()


def load_config(config_path: Path | None = None) -> PathSyncConfig:
    """Load or create configuration."""
    config = PathSyncConfig.load(config_path)
    config.ensure_directories()
    return config
