import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def create_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Create (or fetch) a named logger writing to stdout.

    Args:
        name: Logger name
        level: Logging level name. Defaults to ZOOM_LOG_LEVEL or INFO.

    Returns:
        Configured logger instance
    """
    level = (level or os.getenv("ZOOM_LOG_LEVEL", "INFO")).upper()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level, logging.INFO))

    # Prevent duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
