"""Lazy materialization and expanded-folder restoration for built trees.

A freshly built tree only has its top level materialized. Opening a folder
materializes its children; the recorded expanded keys are replayed after every
rebuild so the visible shape of the tree survives.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .build import expand_tree
from .descendants import iter_items, unique_items
from .tags import (
    TAG_SEPARATOR,
    UNTAGGED_TAG,
    ancestor_tag_set,
    ancestor_to_longest_tag,
    ancestor_to_tags,
    fold_tag,
    strip_subtree_mark,
    unique,
    unique_folded,
)
from .types import Item, TagNode

if TYPE_CHECKING:
    from ..settings import TagTreeSettings

logger = logging.getLogger(__name__)

DEFAULT_OPEN_DEPTH = 1


def node_depth(node: TagNode) -> int:
    return len(node.ancestors) - 1


def _reachable_items(node: TagNode) -> list[Item]:
    if node.all_descendants is not None:
        return node.all_descendants
    return unique_items(iter_items(node))


def is_auto_expand_tree(node: TagNode) -> bool:
    """Return whether opening ``node`` should also open its only branch.

    True when the node holds a single document, a single tag branch and no
    documents of its own, or when every document below it resolves to the
    same next tag segment.
    """
    tag_children = node.tag_children()
    if not tag_children:
        return False
    items = _reachable_items(node)
    if len(items) == 1:
        return True
    if len(tag_children) == 1 and not node.item_children():
        return True

    chain_tags = ancestor_to_tags(node.ancestors[1:])
    longest = ancestor_to_longest_tag(chain_tags)
    chain_folded = {fold_tag(tag) for tag in chain_tags}

    def trim(tag: str) -> str:
        for prefix in longest:
            if fold_tag(tag).startswith(fold_tag(prefix) + TAG_SEPARATOR):
                tag = tag[len(prefix) + 1:]
        return tag

    first_level = unique_folded(
        [
            *(trim(tag).split(TAG_SEPARATOR, 1)[0] for item in items for tag in item.tags),
            *(strip_subtree_mark(child.tag) for child in tag_children),
        ]
    )
    first_level = [tag for tag in first_level if tag and fold_tag(tag) not in chain_folded]
    if len(first_level) == 1:
        return True

    if len(tag_children) == 1 and len(items) > 1:
        combined = {fold_tag(tag) for item in items for tag in item.tags}
        return all({fold_tag(tag) for tag in item.tags} == combined for item in items)
    return False


def omitted_tags(node: TagNode) -> list[str]:
    """Tags left on a single-document folder that never became sub-folders."""
    if node.tag_children():
        return []
    items = _reachable_items(node)
    if len(items) != 1:
        return []
    represented = ancestor_tag_set(node.ancestors)
    return [tag for tag in unique(items[0].tags) if fold_tag(tag) not in represented]


def _child_toward(node: TagNode, key: str) -> TagNode | None:
    """Pick the child on the path to ``key``, preferring the longest key."""
    candidates = [
        child
        for child in node.tag_children()
        if child.key == key or key.startswith(child.key + TAG_SEPARATOR)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda child: len(child.key))


def find_node(root: TagNode, key: str) -> TagNode | None:
    """Locate the TagNode whose ancestor key equals ``key``.

    Only already materialized nodes are visited.
    """
    node: TagNode | None = root
    while node is not None and node.key != key:
        node = _child_toward(node, key)
    return node


class _Materializer:
    """Expands nodes on demand while honoring the depth limit."""

    def __init__(self, settings: "TagTreeSettings") -> None:
        self.reduce_nested_parent = settings.reduce_nested_parent
        self.split_nested = not settings.is_link_tree
        self.expand_limit = settings.expand_limit

    def allowed(self, node: TagNode) -> bool:
        return not self.expand_limit or node_depth(node) < self.expand_limit

    def materialize(self, node: TagNode) -> bool:
        if not self.allowed(node):
            return False
        return expand_tree(node, self.reduce_nested_parent, split_nested=self.split_nested)

    def open(self, node: TagNode, depth: int = DEFAULT_OPEN_DEPTH) -> None:
        """Materialize ``node`` and ``depth`` levels below it.

        Dedicated and auto-expanding children are followed without consuming
        depth, matching how the view unfolds them.
        """
        if depth < 0 or omitted_tags(node):
            return
        self.materialize(node)
        for child in node.tag_children():
            follow = child.is_dedicated_tree or is_auto_expand_tree(child)
            self.open(child, depth if follow else depth - 1)

    def walk_to(self, root: TagNode, key: str) -> TagNode | None:
        node: TagNode | None = root
        while node is not None and node.key != key:
            self.materialize(node)
            node = _child_toward(node, key)
        return node


def open_folder(root: TagNode, key: str, settings: "TagTreeSettings") -> TagNode | None:
    """Materialize the folder at ``key`` and one level below it."""
    materializer = _Materializer(settings)
    node = materializer.walk_to(root, key)
    if node is not None:
        materializer.open(node)
    return node


def restore_expanded_folders(root: TagNode, expanded_folders: Iterable[str], settings: "TagTreeSettings") -> int:
    """Replay the expanded-folder set on a freshly built tree.

    Returns how many recorded keys were found. Missing keys are skipped; the
    caller keeps them recorded in case the folder comes back.
    """
    materializer = _Materializer(settings)
    materializer.open(root)
    restored = 0
    for key in expanded_folders:
        node = materializer.walk_to(root, key)
        if node is None:
            logger.debug("expanded folder %r is not in the tree", key)
            continue
        materializer.open(node)
        restored += 1
    return restored


def expand_untagged_to_root(root: TagNode) -> bool:
    """Dissolve the ``_untagged`` folder and list its documents on the root."""
    untagged = next(
        (child for child in root.tag_children() if fold_tag(child.tag) == UNTAGGED_TAG),
        None,
    )
    if untagged is None:
        return False
    root.children = [child for child in root.children if child is not untagged]
    root.children.extend(dataclasses.replace(item, tags=()) for item in unique_items(iter_items(untagged)))
    root.invalidate()
    return True


def sorted_expanded_folders(expanded_folders: Iterable[str]) -> list[str]:
    """De-duplicate keys and order them shallowest first."""
    return sorted(unique(expanded_folders), key=lambda key: key.count(TAG_SEPARATOR))


__all__ = [
    "DEFAULT_OPEN_DEPTH",
    "node_depth",
    "is_auto_expand_tree",
    "omitted_tags",
    "find_node",
    "open_folder",
    "restore_expanded_folders",
    "expand_untagged_to_root",
    "sorted_expanded_folders",
]
