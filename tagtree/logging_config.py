"""Logging configuration for tagtree.

Library modules only create loggers; handlers are installed here by the CLI.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Send ``tagtree`` records to stderr; DEBUG when ``verbose``, else WARNING."""
    logger = logging.getLogger("tagtree")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(
        isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr
        for handler in logger.handlers
    ):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging"]
