"""Post-build normalization: drop empty folders and redundant sibling branches."""

from __future__ import annotations

from .descendants import subtree_paths
from .types import TagNode


def snip_empty(node: TagNode) -> bool:
    """Remove every TagNode without children below ``node``; return whether any went."""
    removed = False
    for child in node.tag_children():
        if snip_empty(child):
            removed = True
    kept = [child for child in node.children if not (isinstance(child, TagNode) and not child.children)]
    if len(kept) != len(node.children):
        node.children = kept
        removed = True
    if removed:
        node.invalidate()
    return removed


def merge_redundant_combination(node: TagNode) -> bool:
    """Keep only the first of sibling TagNodes covering the exact same item set.

    Children are reduced first so nested duplicates resolve bottom-up. Returns
    whether anything was removed.
    """
    removed = False
    for child in node.tag_children():
        if merge_redundant_combination(child):
            removed = True

    seen: set[frozenset[str]] = set()
    kept = []
    for child in node.children:
        if isinstance(child, TagNode):
            paths = subtree_paths(child)
            if paths in seen:
                continue
            seen.add(paths)
        kept.append(child)
    if len(kept) != len(node.children):
        node.children = kept
        removed = True
    if removed:
        node.invalidate()
    return removed


__all__ = ["snip_empty", "merge_redundant_combination"]
