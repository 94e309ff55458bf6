"""Runtime orchestration for live tag-tree sessions.

This package groups the incremental update controller, its debounce queue,
and the host document store contract.
"""

from __future__ import annotations

from .controller import TagTreeController
from .debounce import DebounceQueue
from .store import DocumentStore, InMemoryDocumentStore

__all__ = [
    "TagTreeController",
    "DebounceQueue",
    "DocumentStore",
    "InMemoryDocumentStore",
]
