"""Minimal logging utilities for dmlex.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from dmlex.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Refilled scan buffer")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "dmlex." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("scanner")
        >>> logger.name
        'dmlex.scanner'
    """
    if not (name == "dmlex" or name.startswith("dmlex.")):
        name = f"dmlex.{name}"
    return logging.getLogger(name)
