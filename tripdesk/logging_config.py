import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Console-only logging for the whole package (cloud friendly)."""
    logger = logging.getLogger("tripdesk")
    logger.setLevel((level or settings.log_level).upper())

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Remove any pre-existing handlers to avoid duplicates on reload
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.addHandler(console_handler)
    return logger
