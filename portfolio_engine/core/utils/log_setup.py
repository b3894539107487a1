"""
Logging configuration.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    """Replace loguru's default sink with a formatted stderr sink."""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG" if debug else level.upper())
