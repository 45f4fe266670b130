"""Logging helpers shared by every filterable module."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "filterable"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package namespace.

    Handlers are only attached to the package root logger, so every module
    logger propagates to the same stream.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
    return logging.getLogger(name)


def set_log_level(level: Optional[Union[str, int]]) -> None:
    """Set the package log level from a name ("DEBUG") or a logging constant."""
    if level is None:
        return
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    get_logger(ROOT_LOGGER_NAME).setLevel(level)
