"""Minimal logging utilities for Ladrillos.

Provides a get_logger function that namespaces standard library loggers
under "ladrillos." so applications can tune the whole package at once.

Example:
    >>> from ladrillos.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Rendering %d blocks", 3)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger under the "ladrillos." namespace

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'ladrillos.mymodule'
    """
    if not (name == "ladrillos" or name.startswith("ladrillos.")):
        name = f"ladrillos.{name}"
    return logging.getLogger(name)
