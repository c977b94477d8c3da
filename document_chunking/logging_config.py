"""
Logging setup for the chunking engine.

Every module logs through ``logging.getLogger(__name__)``, so all records
flow through the ``document_chunking`` logger. The engine never configures
logging on its own; ``ChunkingService`` calls ``setup_logging`` only when a
log level is configured (``CHUNKING_LOG_LEVEL``).
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "document_chunking"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """Translate "debug", "INFO", 20, ... into a logging level number."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        level: Level number or name
        log_file: Optional path to a log file
        format_string: Optional custom format string

    Returns:
        The package logger
    """
    numeric_level = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(component: str) -> logging.Logger:
    """Logger for a component below the package logger, e.g. "service"."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")
