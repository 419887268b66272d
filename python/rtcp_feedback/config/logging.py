"""
Logging for the RTCP receiver and CLI.

All loggers live under the ``rtcp`` namespace. The codec modules never log;
only the receiver, metrics exporter and CLI do.

Environment Variables:
    RTCP_LOG_LEVEL - Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER = "rtcp"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Optional[str], debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if level is None:
        level = os.getenv("RTCP_LOG_LEVEL", "INFO")
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: Optional[str] = None, debug: bool = False) -> logging.Logger:
    """
    Attach a stdout handler to the ``rtcp`` logger.

    Calling it again only changes the level; the handler is installed once.

    Args:
        level: Level name. Default from RTCP_LOG_LEVEL or INFO.
        debug: Force DEBUG regardless of level (RTCP_DEBUG).

    Returns:
        The ``rtcp`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_resolve_level(level, debug))

    if not any(getattr(h, "_rtcp_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._rtcp_handler = True
        logger.addHandler(handler)

    return logger


def get_logger(area: str) -> logging.Logger:
    """Logger for one area of the package, e.g. ``get_logger("receiver")``."""
    if area == ROOT_LOGGER or area.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(area)
    return logging.getLogger(ROOT_LOGGER).getChild(area)
