"""Logging configuration for fleetpanel.

Structured logging via loguru. Logging is disabled by default, like any
library, and enabled by adding sinks with ``setup_logging``:

    from fleetpanel.logging import LogConfig, setup_logging, teardown_logging

    handlers = setup_logging(LogConfig(level="DEBUG", file="fleetpanel.log"))
    ...
    teardown_logging(handlers)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

# Disable by default (library behavior)
logger.disable("fleetpanel")

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_LEVELS: tuple[LogLevel, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | {extra[component]} - {message}"
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging configuration for the panel.

    Attributes:
        level: Minimum log level for the console.
        file: Path to log file. If provided, logs are written to this file.
        console: Whether to log to stderr. Defaults to True.
        rotation: File rotation policy (e.g., "50 MB", "1 day").
        retention: Number of old log files to keep.
    """

    level: LogLevel = "INFO"
    file: str | None = None
    console: bool = True
    rotation: str = "50 MB"
    retention: int = 10


def _fleetpanel_records(record: Record) -> bool:
    name = record["name"] or ""
    if name != "fleetpanel" and not name.startswith("fleetpanel."):
        return False
    record["extra"].setdefault("component", "-")
    return True


def setup_logging(config: LogConfig) -> list[int]:
    """Enable fleetpanel logging and return handler IDs for cleanup."""
    logger.enable("fleetpanel")
    handler_ids: list[int] = []

    if config.console:
        handler_ids.append(
            logger.add(
                sys.stderr,
                level=config.level,
                format=CONSOLE_FORMAT,
                colorize=True,
                filter=_fleetpanel_records,
            )
        )

    if config.file:
        handler_ids.append(
            logger.add(
                config.file,
                level="DEBUG",  # File always captures everything
                format=FILE_FORMAT,
                rotation=config.rotation,
                retention=config.retention,
                compression="zip",
                diagnose=False,
                enqueue=True,
                filter=_fleetpanel_records,
            )
        )

    return handler_ids


def teardown_logging(handler_ids: list[int]) -> None:
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("fleetpanel")
