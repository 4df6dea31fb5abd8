"""Logging utilities for indexgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "indexgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the indexgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, enabled: bool = True, debug: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the indexgen logger with console output and optional file sink.

    ``enabled=False`` silences every severity unless ``debug`` is also set.
    """
    if debug:
        level = logging.DEBUG
    elif enabled:
        level = logging.INFO
    else:
        # Child loggers inherit the effective level, so this silences the whole tree.
        level = logging.CRITICAL + 1
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[indexgen] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
