"""
Logging configuration for FraudLens.

Every module asks for its logger through get_logger(__name__); setup_logging
attaches handlers once to the package logger so library users who never call
it keep Python's default behaviour.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from fraudlens.core.constants import LOG_FORMAT, LOG_DATE_FORMAT

PACKAGE_LOGGER = "fraudlens"


def setup_logging(level: Union[str, int] = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level name or number
        log_file: Optional file that receives the same records as the console

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Re-running setup (CLI tests, notebooks) must not stack handlers
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    package_logger.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger for a FraudLens module."""
    return logging.getLogger(name)
