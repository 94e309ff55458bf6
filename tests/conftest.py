"""Shared test setup: import ``tagtree`` from this checkout, quiet its loggers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

REPO_ROOT = str(Path(__file__).resolve().parent.parent)
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


@pytest.fixture(autouse=True)
def _reset_tagtree_logging():
    """Undo handlers and levels a test installed through ``configure_logging``."""
    logger = logging.getLogger("tagtree")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
