"""Exception types raised by tag-tree construction and pin-table parsing."""

from __future__ import annotations


class TagTreeError(Exception):
    """Base class for tagtree errors."""


class TagTreeBuildError(TagTreeError):
    """A structural invariant broke while building the tree.

    This always indicates a logic bug; the controller logs it and keeps the
    previous tree visible.
    """


class TagInfoError(TagTreeError):
    """The pin/override table could not be parsed."""


__all__ = ["TagTreeError", "TagTreeBuildError", "TagInfoError"]
