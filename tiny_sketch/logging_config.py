"""
Logging configuration utilities for TinySketch.

The library is silent by default: the "tiny_sketch" logger only has a
NullHandler. Applications either configure logging themselves or call one of
the helpers below.

Example usage:
    import tiny_sketch

    tiny_sketch.enable_console_logging(level="DEBUG")

    # Or configure from the environment
    tiny_sketch.configure_from_env()

Environment variables:
    TINY_SKETCH_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

import logging
import os
from typing import Optional, Union

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "set_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "tiny_sketch"
ENV_LEVEL = "TINY_SKETCH_LOGGING"


def _get_level(level: Union[str, int]) -> int:
    """Convert a level string or int to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    """Get the tiny_sketch root logger."""
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close all handlers from the tiny_sketch logger except NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(
    level: Union[str, int] = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """
    Enable console (stderr) logging for tiny_sketch.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created StreamHandler.
    """
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    handler = logging.StreamHandler()
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(format, date_format))

    logger.addHandler(handler)
    return handler


def disable_logging() -> None:
    """Remove all handlers added by this module and silence the library again."""
    _clear_handlers()
    _get_logger().setLevel(logging.NOTSET)


def set_level(level: Union[str, int]) -> None:
    """Set the level of the tiny_sketch logger and its handlers."""
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    for handler in logger.handlers:
        if not isinstance(handler, logging.NullHandler):
            handler.setLevel(_get_level(level))


def configure_from_env() -> Optional[logging.StreamHandler]:
    """
    Enable console logging if TINY_SKETCH_LOGGING is set.

    Returns:
        The created handler, or None if the variable is not set.
    """
    level = os.environ.get(ENV_LEVEL)
    if not level:
        return None

    _clear_handlers()
    return enable_console_logging(level=level)
