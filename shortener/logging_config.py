"""Logging setup for the URL shortener."""

__all__ = ["LOGGER_NAME", "get_logger", "setup_logging"]

import logging

LOGGER_NAME = "shortener"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the service logger once and set its level.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...). Unknown names fall
            back to INFO.

    Returns:
        logging.Logger: The configured ``shortener`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
