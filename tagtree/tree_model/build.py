"""Tag-tree construction from flat item lists.

``expand_tree`` turns the Item children of a node into one TagNode per tag not
yet represented at that position. ``split_tag`` decomposes multi-segment tags
into a head node plus a continuation node. Both repeat until a pass makes no
structural change.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..errors import TagTreeBuildError
from .tags import (
    ROOT_TAG,
    SUBTREE_MARK,
    TAG_SEPARATOR,
    ancestor_prefix_set,
    ancestor_to_tags,
    canonical_tag,
    fold_tag,
    is_subtree_tag,
    same_tag,
    split_head,
    unique,
    unique_folded,
)
from .types import Item, TagNode, TagTreeNode

logger = logging.getLogger(__name__)


def find_tag_child(node: TagNode, tag: str) -> TagNode | None:
    """Return the TagNode child of ``node`` whose tag equals ``tag`` ignoring case."""
    folded = fold_tag(tag)
    for child in node.children:
        if isinstance(child, TagNode) and fold_tag(child.tag) == folded:
            return child
    return None


def _has_child(node: TagNode, child: TagNode) -> bool:
    return any(candidate is child for candidate in node.children)


def _segment_order(child: TagTreeNode) -> tuple[int, int]:
    """Split shallow tags first so deeper ones find their head already in place."""
    if isinstance(child, TagNode):
        return (0, child.tag.count(TAG_SEPARATOR))
    return (1, 0)


def _represented_tags(node: TagNode) -> set[str]:
    """Folded full tags already spelled by a child chain of ``node``."""
    represented: set[str] = set()

    def walk(entry: TagNode) -> None:
        tags = ancestor_to_tags(entry.ancestors[1:])
        if tags:
            represented.add(fold_tag(tags[-1]))
        for child in entry.children:
            if isinstance(child, TagNode) and is_subtree_tag(child.tag):
                walk(child)

    for child in node.tag_children():
        walk(child)
    return represented


def _rebase(node: TagNode) -> None:
    """Rewrite descendant ancestor chains after ``node`` moved."""
    for child in node.children:
        if isinstance(child, TagNode):
            child.ancestors = [*node.ancestors, child.tag]
            _rebase(child)


def merge_children(target: TagNode, extra: Iterable[TagTreeNode]) -> None:
    """Merge ``extra`` into ``target`` without duplicating items or tags.

    Items are de-duplicated by path. TagNodes with the same folded tag merge
    recursively.
    """
    known_paths = {child.path for child in target.children if isinstance(child, Item)}
    for child in extra:
        if isinstance(child, Item):
            if child.path in known_paths:
                continue
            known_paths.add(child.path)
            target.children.append(child)
            continue
        existing = find_tag_child(target, child.tag)
        if existing is None:
            child.ancestors = [*target.ancestors, child.tag]
            _rebase(child)
            target.children.append(child)
        else:
            merge_children(existing, child.children)
    target.invalidate()


def _adopt(node: TagNode, child: TagNode) -> None:
    existing = find_tag_child(node, child.tag)
    if existing is None:
        node.children.append(child)
        _rebase(child)
    else:
        merge_children(existing, child.children)


def _expand_level(node: TagNode, created_tags: set[str]) -> bool:
    """Create one TagNode per tag carried by the Item children of ``node``.

    A tag is skipped when the ancestor chain or a child chain already spells
    it. ``created_tags`` holds the tags this expansion made before; each is
    created at most once, so the expansion loop ends.
    """
    items = node.item_children()
    if not items:
        return False
    blocked = ancestor_prefix_set(node.ancestors) | _represented_tags(node) | created_tags
    created = False
    for tag in unique_folded(tag for item in items for tag in item.tags):
        folded = fold_tag(tag)
        if folded in blocked:
            continue
        members = [item for item in items if any(fold_tag(candidate) == folded for candidate in item.tags)]
        node.children.append(
            TagNode(
                tag=tag,
                ancestors=[*node.ancestors, tag],
                children=members,
                extra_tags=node.extra_tags,
            )
        )
        blocked.add(folded)
        created_tags.add(folded)
        created = True
    return created


def _split_child(node: TagNode, child: TagNode, reduce_nested_parent: bool) -> None:
    """Replace the multi-segment ``child`` of ``node`` by a head/continuation pair."""
    try:
        node.children.remove(child)
    except ValueError as exc:
        raise TagTreeBuildError(f"split target {child.tag!r} is not a child of {node.key!r}") from exc

    head, rest = split_head(child.tag)
    base = child.ancestors[:-1]
    plain = not is_subtree_tag(child.tag)

    if plain and fold_tag(child.tag) in ancestor_prefix_set(base):
        # The chain already spells this tag; the items are still on ``node``.
        return

    chain = [fold_tag(segment) for segment in base[1:]]
    if plain and reduce_nested_parent and fold_tag(head) in chain:
        parent_tag = canonical_tag(base)
        full_tag = canonical_tag(child.ancestors)
        prefix = fold_tag(parent_tag) + TAG_SEPARATOR
        if parent_tag and fold_tag(full_tag).startswith(prefix):
            continuation = SUBTREE_MARK + full_tag[len(parent_tag) + 1:]
            ancestors = [*base, continuation]
        else:
            continuation = rest
            ancestors = [*base, head, rest]
        existing = find_tag_child(node, continuation)
        if existing is None or same_tag(canonical_tag(existing.ancestors), full_tag):
            _adopt(
                node,
                TagNode(
                    tag=continuation,
                    ancestors=ancestors,
                    children=list(child.children),
                    is_dedicated_tree=child.is_dedicated_tree,
                    extra_tags=child.extra_tags,
                ),
            )
            return
        # A sibling continuation spells another tag; keep this one under its head.

    parent = find_tag_child(node, head)
    if parent is None:
        head_node = TagNode(
            tag=head,
            ancestors=[*base, head],
            is_dedicated_tree=True,
            extra_tags=child.extra_tags,
        )
        continuation_node = TagNode(
            tag=rest,
            ancestors=[*head_node.ancestors, rest],
            children=list(child.children),
            extra_tags=child.extra_tags,
        )
        _rebase(continuation_node)
        head_node.children.append(continuation_node)
        node.children.append(head_node)
        return

    existing = find_tag_child(parent, rest)
    if existing is not None:
        merge_children(existing, child.children)
        return

    continuation_node = TagNode(
        tag=rest,
        ancestors=[*parent.ancestors, rest],
        children=list(child.children),
        extra_tags=child.extra_tags,
    )
    _rebase(continuation_node)
    parent.children.append(continuation_node)
    if parent.is_dedicated_tree and (len(parent.tag_children()) > 1 or parent.item_children()):
        parent.is_dedicated_tree = False
    parent.invalidate()


def split_tag(node: TagNode, reduce_nested_parent: bool = True) -> bool:
    """Decompose every slash-carrying TagNode below ``node``.

    Returns whether anything changed. A dedicated head that ends up holding
    items directly stops being dedicated.
    """
    modified = False
    while True:
        changed = False
        node.children.sort(key=_segment_order)
        for child in node.tag_children():
            if not _has_child(node, child):
                continue
            if split_tag(child, reduce_nested_parent):
                changed = True
            if TAG_SEPARATOR in child.tag:
                _split_child(node, child, reduce_nested_parent)
                changed = True
        if not changed:
            break
        modified = True

    if modified:
        node.invalidate()
        if node.is_dedicated_tree and node.item_children():
            node.is_dedicated_tree = False
    return modified


def expand_tree(
    node: TagNode,
    reduce_nested_parent: bool = True,
    *,
    depth: int | None = 0,
    split_nested: bool = True,
) -> bool:
    """Materialize tag folders under ``node`` and split nested tags.

    ``depth`` controls recursion into the resulting TagNode children: ``0``
    expands only ``node``, ``None`` expands the whole reachable tree.
    """
    modified = False
    created_tags: set[str] = set()
    while True:
        changed = _expand_level(node, created_tags)
        if split_nested and split_tag(node, reduce_nested_parent):
            changed = True
        if not changed:
            break
        modified = True
    if modified:
        node.invalidate()

    if depth is None or depth > 0:
        next_depth = None if depth is None else depth - 1
        for child in node.tag_children():
            if expand_tree(child, reduce_nested_parent, depth=next_depth, split_nested=split_nested):
                modified = True
    return modified


def build_tag_tree(
    items: Iterable[Item],
    archive_tags: Iterable[str] = (),
    reduce_nested_parent: bool = True,
    *,
    split_nested: bool = True,
) -> TagNode:
    """Build a fresh root from ``items``.

    Items carrying an archive tag are grouped under one top-level node per
    archive tag instead of joining the normal hierarchy.
    """
    items = list(items)
    archive = unique(fold_tag(tag) for tag in archive_tags if tag)
    archive_set = set(archive)

    root = TagNode(
        tag=ROOT_TAG,
        ancestors=[ROOT_TAG],
        children=[item for item in items if not any(fold_tag(tag) in archive_set for tag in item.tags)],
    )
    for archive_tag in archive:
        archived = [item for item in items if any(fold_tag(tag) == archive_tag for tag in item.tags)]
        if archived:
            root.children.append(TagNode(tag=archive_tag, ancestors=[ROOT_TAG, archive_tag], children=archived))

    expand_tree(root, reduce_nested_parent, split_nested=split_nested)
    root.children = root.tag_children()
    logger.debug("built root with %d top-level tags from %d items", len(root.children), len(items))
    return root


__all__ = [
    "build_tag_tree",
    "expand_tree",
    "split_tag",
    "find_tag_child",
    "merge_children",
]
