"""Aggregated descendant caches with dirty propagation.

Each TagNode caches the items reachable below it. ``ripple_dirty`` pushes
dirtiness from changed subtrees up to the root so ``expand_descendants`` only
recomputes what changed; clean subtrees keep their cached lists untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .types import Item, TagNode, TagTreeNode

HIDE_NONE = "NONE"
HIDE_DEDICATED_INTERMEDIATES = "DEDICATED_INTERMIDIATES"
HIDE_ALL_EXCEPT_BOTTOM = "ALL_EXCEPT_BOTTOM"
HIDE_ITEMS_TYPES = (HIDE_NONE, HIDE_DEDICATED_INTERMEDIATES, HIDE_ALL_EXCEPT_BOTTOM)


def iter_items(entry: TagTreeNode) -> Iterator[Item]:
    """Yield every item in the subtree of ``entry`` (duplicates included)."""
    if isinstance(entry, Item):
        yield entry
        return
    for child in entry.children:
        yield from iter_items(child)


def unique_items(items: Iterable[Item]) -> list[Item]:
    """De-duplicate by path, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[Item] = []
    for item in items:
        if item.path in seen:
            continue
        seen.add(item.path)
        out.append(item)
    return out


def subtree_paths(entry: TagTreeNode) -> frozenset[str]:
    return frozenset(item.path for item in iter_items(entry))


def ripple_dirty(node: TagNode) -> bool:
    """Propagate dirtiness upward; return whether ``node`` must be recomputed."""
    dirty_child = False
    for child in node.children:
        if isinstance(child, TagNode) and ripple_dirty(child):
            dirty_child = True
    if dirty_child:
        node.invalidate()
    return node.descendants is None


def _memo_items(node: TagNode) -> list[Item]:
    """Items found below the children of ``node``, skipping its own item level."""
    if node.descendants_memo is None:
        node.descendants_memo = unique_items(
            item
            for child in node.children
            if isinstance(child, TagNode)
            for grandchild in child.children
            for item in iter_items(grandchild)
        )
    return node.descendants_memo


def expand_descendants(node: TagNode, hide_items: str = HIDE_NONE) -> list[Item]:
    """Recompute caches of ``node`` reusing clean child caches.

    Returns the unfiltered item set (``all_descendants``). ``descendants`` is
    the visible set after ``hide_items`` removes items that also sit deeper.
    """
    ret: list[Item] = []
    seen: set[str] = set()
    for child in node.children:
        if isinstance(child, TagNode):
            if child.descendants is None or child.all_descendants is None:
                source = expand_descendants(child, hide_items)
            else:
                source = child.all_descendants
        else:
            source = [child]
        for item in source:
            if item.path in seen:
                continue
            seen.add(item.path)
            ret.append(item)

    memo = _memo_items(node)
    memo_paths = {item.path for item in memo}
    hide_nested = hide_items == HIDE_ALL_EXCEPT_BOTTOM or (
        hide_items == HIDE_DEDICATED_INTERMEDIATES and node.is_dedicated_tree
    )
    if hide_nested:
        node.descendants = [item for item in ret if item.path not in memo_paths]
    else:
        node.descendants = list(ret)
    node.all_descendants = ret
    node.items_count = len(seen | memo_paths)
    return ret


__all__ = [
    "HIDE_NONE",
    "HIDE_DEDICATED_INTERMEDIATES",
    "HIDE_ALL_EXCEPT_BOTTOM",
    "HIDE_ITEMS_TYPES",
    "iter_items",
    "unique_items",
    "subtree_paths",
    "ripple_dirty",
    "expand_descendants",
]
