"""End-to-end tree pipeline: build, restore, normalize, aggregate, order."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from .build import build_tag_tree
from .descendants import expand_descendants, ripple_dirty
from .expansion import expand_untagged_to_root, restore_expanded_folders
from .reduce import merge_redundant_combination, snip_empty
from .sorting import compare_items, compare_tag_nodes, sort_tree
from .types import Item, TagInfo, TagNode

if TYPE_CHECKING:
    from ..settings import TagTreeSettings

logger = logging.getLogger(__name__)


def finalize_tree(
    root: TagNode,
    settings: "TagTreeSettings",
    tag_info: Mapping[str, TagInfo] | None = None,
) -> TagNode:
    """Normalize, refresh the descendant caches, and sort ``root`` in place.

    Safe to call again after further folders were materialized; only subtrees
    that changed are recomputed.
    """
    snip_empty(root)
    if settings.merge_redundant_combination:
        merge_redundant_combination(root)
    if settings.expand_untagged_to_root:
        expand_untagged_to_root(root)
    ripple_dirty(root)
    expand_descendants(root, settings.hide_items)
    sort_tree(root, compare_tag_nodes(settings, tag_info), compare_items(settings))
    return root


def resort_tree(
    root: TagNode,
    settings: "TagTreeSettings",
    tag_info: Mapping[str, TagInfo] | None = None,
) -> TagNode:
    """Re-apply ordering only; structure and caches stay as they are."""
    sort_tree(root, compare_tag_nodes(settings, tag_info), compare_items(settings))
    return root


def build_tree(
    items: Iterable[Item],
    settings: "TagTreeSettings",
    tag_info: Mapping[str, TagInfo] | None = None,
    expanded_folders: Iterable[str] = (),
) -> TagNode:
    """Run the whole pipeline over ``items`` into a fresh root."""
    items = list(items)
    archive_tags = () if settings.is_link_tree else settings.archive_tags
    root = build_tag_tree(
        items,
        archive_tags,
        settings.reduce_nested_parent,
        split_nested=not settings.is_link_tree,
    )
    restored = restore_expanded_folders(root, expanded_folders, settings)
    finalize_tree(root, settings, tag_info)
    logger.debug(
        "pipeline finished: %d items, %d top-level tags, %d expanded folders restored",
        len(items),
        len(root.tag_children()),
        restored,
    )
    return root


__all__ = ["build_tree", "finalize_tree", "resort_tree"]
