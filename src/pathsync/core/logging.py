"""
PathSync structured logging.

Provides structured logging for synchronization passes so that every
write an engine performs can be traced back to the pass that made it.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from pathsync.core.config import LoggingConfig


_configured = False


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.console_enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, config.level))
        handlers.append(console_handler)

    if config.file_enabled:
        config.log_directory.mkdir(parents=True, exist_ok=True)
        log_file = config.log_directory / f"pathsync_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    return handlers or [logging.NullHandler()]


def setup_logging(config: LoggingConfig) -> None:
    """Route structlog through stdlib handlers on stderr and, optionally, a log file."""
    global _configured

    if _configured:
        return

    logging.basicConfig(level=logging.DEBUG, handlers=_build_handlers(config), format="%(message)s")

    if config.json_format:
        renderer: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            *renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name or "pathsync")


class OperationLogger:
    """
    Logs the start and the end of an operation.

    ``outcome`` is called on exit, whether the operation succeeded or not,
    and whatever it returns is logged with the closing event.
    """

    def __init__(
        self,
        operation: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        outcome: Callable[[], dict[str, Any]] | None = None,
        **context: Any,
    ):
        self.operation = operation
        self.logger = (logger or get_logger()).bind(operation=operation, **context)
        self.outcome = outcome
        self._started: float | None = None

    def __enter__(self) -> OperationLogger:
        self._started = time.monotonic()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        elapsed = time.monotonic() - self._started if self._started is not None else 0.0
        result = self.outcome() if self.outcome else {}

        if exc_type is None:
            self.logger.info(f"Completed {self.operation}", duration_seconds=elapsed, **result)
        else:
            self.logger.error(
                f"Failed {self.operation}",
                duration_seconds=elapsed,
                error_type=exc_type.__name__,
                error=str(exc_val),
                **result,
            )
