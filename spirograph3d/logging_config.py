"""
Log output for the spirograph3d CLI and the manim scene.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once per entry point, to the ``spirograph3d`` logger.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "spirograph3d"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: Union[int, str]) -> int:
    """Accept a numeric level or a name such as 'debug' / 'INFO'."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route spirograph3d records to stdout and, optionally, a log file.

    Args:
        level: Threshold for the package logger and its handlers.
        log_file: Path of a log file, truncated on every call.

    Returns:
        The configured package logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # A scene re-render or a second CLI call in the same process must not double every line
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging at {logging.getLevelName(level)}" + (f", also to {log_file}" if log_file else ""))
    return logger
