"""Logging setup.

The managed screen owns stdout, so log records only ever go to a file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(threadName)s - %(name)s - %(message)s"


def configure_logging(path: Optional[Path], level: int = logging.DEBUG) -> Optional[logging.Handler]:
    """
    Attach a file handler to the package logger.

    Returns the handler so callers can detach it, or None when no path
    is configured (records are then dropped by the NullHandler).
    """
    if path is None:
        return None

    logger = logging.getLogger("trinitty")
    logger.setLevel(level)

    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler
