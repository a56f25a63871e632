"""Logging configuration using Loguru.

Engine modules log through ``get_logger(__name__)``; the data layer and
third-party libraries use stdlib ``logging``, which ``setup_logging`` routes
into loguru. Loguru writes a colored console stream and a daily JSON log
file for the batch jobs.

Example:
    >>> from pickem_engine.logging import setup_logging, get_logger
    >>> setup_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.info("Recomputing game {}", game_id)

Status Tags:
    >>> from pickem_engine.logging import SUCCESS, FAIL, WARN
    >>> logger.info(f"{SUCCESS} Game g-101 recomputed")
    >>> logger.warning(f"{WARN} Week 4 has pending games")
    >>> logger.error(f"{FAIL} Game g-101 could not be fetched")
"""

from __future__ import annotations

import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from pickem_engine.config import Settings

# Color-coded status tags for terminal output
SUCCESS = "\033[92m[SUCCESS]\033[0m"  # Green
FAIL = "\033[91m[FAIL]\033[0m"        # Red
WARN = "\033[93m[WARN]\033[0m"        # Yellow

LOG_FILE_PATTERN = "pickem_engine_{time:YYYY-MM-DD}.log"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"

# Third-party loggers that are too chatty at DEBUG
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def status_tag(ok: bool) -> str:
    """SUCCESS for a clean outcome, WARN otherwise."""
    return SUCCESS if ok else WARN


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _add_console_sink(level: str) -> None:
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)


def _add_file_sink(
    log_dir: Path, level: str, rotation: str, retention: str, serialize: bool
) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / LOG_FILE_PATTERN,
        level=level,
        format=FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        serialize=serialize,
        enqueue=True,
    )


def setup_logging(
    level: str = "INFO",
    log_dir: str | Path = "logs",
    rotation: str = "1 day",
    retention: str = "30 days",
    serialize: bool = True,
) -> None:
    """Configure console and file logging for the engine.

    Safe to call repeatedly; previous sinks are replaced.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for the daily log files.
        rotation: When to rotate log files (e.g., "1 day", "100 MB").
        retention: How long to keep old log files.
        serialize: Write JSON records to the file sink.
    """
    logger.remove()
    _add_console_sink(level)
    _add_file_sink(Path(log_dir), level, rotation, retention, serialize)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_from_settings(settings: Settings, verbose: bool = False) -> None:
    """Set up logging from application settings.

    Args:
        settings: Loaded settings providing log_level and log_dir.
        verbose: Force DEBUG regardless of the configured level.
    """
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_dir=settings.log_dir_obj,
    )


def get_logger(name: str) -> Any:
    """Return the loguru logger bound to a module name."""
    return logger.bind(name=name)


__all__ = [
    "FAIL",
    "SUCCESS",
    "WARN",
    "InterceptHandler",
    "configure_from_settings",
    "get_logger",
    "logger",
    "setup_logging",
    "status_tag",
]
