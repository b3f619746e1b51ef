"""Logging configuration helper for applications using jikanclient.

The library itself only creates module loggers under ``jikanclient.*``;
call ``setup_logging`` from an application entry point to see their output.
"""

import logging
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LIBRARY_LOGGER = "jikanclient"


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configures the ``jikanclient`` logger hierarchy.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG, logging.INFO).
        log_format: The format string for log messages.
        log_file: Optional path to a file for logging output.

    Returns:
        The configured library logger.
    """
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.setLevel(log_level)

    # Remove handlers from a previous call
    for handler in library_logger.handlers[:]:
        library_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    library_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        library_logger.addHandler(file_handler)
        library_logger.info(f"Logging to file: {log_file}")

    library_logger.debug(f"Logging configured. Level={logging.getLevelName(log_level)}")
    return library_logger
