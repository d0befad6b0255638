"""
Logging configuration for Scrummer.

Routes the ``scrummer`` logger through a rich handler on stderr, with an
optional plain-text file handler.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "scrummer"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for the service and its scripts.

    Args:
        level: Level name for the scrummer logger (DEBUG, INFO, WARNING, ...)
        log_file: Optional file path to append logs to

    Returns:
        The configured scrummer logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_path=numeric_level <= logging.DEBUG,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)

    return logger
