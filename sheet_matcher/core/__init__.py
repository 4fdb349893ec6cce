"""Matching, merging and duplicate detection over in-memory sheets."""

import logging

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def configure_logger(name: str) -> logging.Logger:
    """Return the module logger, attaching a console handler on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger
