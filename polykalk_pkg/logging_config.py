"""Logging setup for Polykalk.

All loggers live under the ``polykalk`` hierarchy so a single call to
:func:`setup_logging` controls the whole package.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "polykalk"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return the package logger ``polykalk.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure the package root logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path; when given, records are also written there

    Returns:
        The configured ``polykalk`` logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Repeated calls (tests, REPL "debug on") must not stack handlers
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    return root


def set_level(level: str | int) -> None:
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def get_level() -> int:
    """Return the level set on the package root logger (NOTSET if none)."""
    return logging.getLogger(ROOT_LOGGER_NAME).level
