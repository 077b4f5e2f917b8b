"""Logging helpers shared by the console and HTTP front ends."""

from __future__ import annotations

import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED = False


def configure_logging(level: int = logging.WARNING) -> None:
    """Attach a single stream handler to the package logger.

    Later calls only adjust the level, so reloading a front end never stacks
    duplicate handlers.
    """
    global _CONFIGURED
    logger = logging.getLogger("expense_index")
    logger.setLevel(level)
    if _CONFIGURED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    _CONFIGURED = True
