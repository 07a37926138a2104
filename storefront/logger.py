"""
Logging configuration for the Storefront Service.

A single package logger is configured from settings.LOG_LEVEL; modules ask
for a child logger with get_logger(__name__).
"""
import logging
import sys

from storefront.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
logger = logging.getLogger("storefront")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Module name; names outside the package are nested under it

    Returns:
        Logger instance
    """
    if not name:
        return logger
    if name == "storefront" or name.startswith("storefront."):
        return logging.getLogger(name)
    return logging.getLogger(f"storefront.{name}")
