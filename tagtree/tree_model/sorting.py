"""Comparator construction for tag folders and document leaves.

Comparators are pure functions of settings and the pin table. Tag folders
always precede documents among siblings. Pinned tags (``TagInfo.key`` set)
precede unpinned ones in either direction; the direction flag only inverts
order within each group.
"""

from __future__ import annotations

import locale
import logging
import re
from collections.abc import Callable, Mapping
from functools import cmp_to_key
from typing import TYPE_CHECKING

from .tags import canonical_tag, strip_subtree_mark
from .types import Item, TagInfo, TagNode, TagTreeNode

if TYPE_CHECKING:
    from ..settings import TagTreeSettings

logger = logging.getLogger(__name__)

ITEM_ORDER_KEYS = {
    "DISPNAME": "display_name",
    "FULLPATH": "path",
    "MTIME": "mtime",
    "CTIME": "ctime",
    "NAME": "filename",
}
TAG_ORDER_KEYS = ("NAME", "ITEMS")
ORDER_DIRECTIONS = ("ASC", "DESC")
PIN_COUNT_OFFSET = 100000

_NUMBER_RE = re.compile(r"(\d+)")

TagComparator = Callable[[TagNode, TagNode], int]
ItemComparator = Callable[[Item, Item], int]


def parse_sort_type(value: str, valid_keys: tuple[str, ...] | Mapping[str, str], default_key: str) -> tuple[str, int]:
    """Split ``"KEY_DIR"`` into ``(key, invert)`` where ``invert`` is ``1`` or ``-1``."""
    key, _sep, direction = str(value).rpartition("_")
    if key not in valid_keys or direction not in ORDER_DIRECTIONS:
        logger.warning("unknown sort type %r; using %s_ASC", value, default_key)
        return default_key, 1
    return key, -1 if direction == "DESC" else 1


def text_sort_key(text: str) -> tuple[str | int, ...]:
    """Case-insensitive, locale-collated key with numeric runs compared as numbers."""
    parts = _NUMBER_RE.split(text.casefold())
    return tuple(int(part) if index % 2 else locale.strxfrm(part) for index, part in enumerate(parts))


def compare_text(a: str, b: str) -> int:
    key_a = text_sort_key(a)
    key_b = text_sort_key(b)
    if key_a != key_b:
        return -1 if key_a < key_b else 1
    if a == b:
        return 0
    return -1 if a < b else 1


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def tag_info_for(node: TagNode, tag_info: Mapping[str, TagInfo] | None) -> TagInfo | None:
    """Look up the pin record by full tag path, then by the bare segment."""
    if not tag_info:
        return None
    full = canonical_tag(node.ancestors)
    if full in tag_info:
        return tag_info[full]
    return tag_info.get(strip_subtree_mark(node.tag))


def _is_pinned(node: TagNode, tag_info: Mapping[str, TagInfo] | None) -> bool:
    info = tag_info_for(node, tag_info)
    return info is not None and info.is_pinned


def compare_tag_nodes(settings: "TagTreeSettings", tag_info: Mapping[str, TagInfo] | None = None) -> TagComparator:
    """Build the sibling comparator for tag folders."""
    key, invert = parse_sort_type(settings.sort_type_tag, TAG_ORDER_KEYS, "NAME")

    if key == "ITEMS":

        def compare_by_count(a: TagNode, b: TagNode) -> int:
            a_count = a.items_count - (PIN_COUNT_OFFSET * invert if _is_pinned(a, tag_info) else 0)
            b_count = b.items_count - (PIN_COUNT_OFFSET * invert if _is_pinned(b, tag_info) else 0)
            return _sign(a_count - b_count) * invert

        return compare_by_count

    def compare_by_name(a: TagNode, b: TagNode) -> int:
        info_a = tag_info_for(a, tag_info)
        info_b = tag_info_for(b, tag_info)
        pinned_a = info_a is not None and info_a.is_pinned
        pinned_b = info_b is not None and info_b.is_pinned
        if pinned_a != pinned_b:
            return -1 if pinned_a else 1
        order = 0
        if pinned_a and pinned_b:
            order = compare_text(info_a.key or "", info_b.key or "")
        if order == 0:
            order = compare_text(strip_subtree_mark(a.tag), strip_subtree_mark(b.tag))
        return order * invert

    return compare_by_name


def compare_items(settings: "TagTreeSettings") -> ItemComparator:
    """Build the sibling comparator for document leaves."""
    key, invert = parse_sort_type(settings.sort_type, ITEM_ORDER_KEYS, "DISPNAME")
    attribute = ITEM_ORDER_KEYS[key]

    if attribute in ("mtime", "ctime"):

        def compare_by_time(a: Item, b: Item) -> int:
            return _sign(getattr(a, attribute) - getattr(b, attribute)) * invert

        return compare_by_time

    def compare_by_text(a: Item, b: Item) -> int:
        return compare_text(getattr(a, attribute), getattr(b, attribute)) * invert

    return compare_by_text


def compare_siblings(compare_tags: TagComparator, compare_leaves: ItemComparator) -> Callable[[TagTreeNode, TagTreeNode], int]:
    """Combine both comparators; tag folders always sort before documents."""

    def compare(a: TagTreeNode, b: TagTreeNode) -> int:
        if isinstance(a, TagNode):
            if isinstance(b, TagNode):
                return compare_tags(a, b)
            return -1
        if isinstance(b, TagNode):
            return 1
        return compare_leaves(a, b)

    return compare


def sort_tree(node: TagNode, compare_tags: TagComparator, compare_leaves: ItemComparator) -> None:
    """Order every level below ``node`` in place, including cached descendants."""
    sibling_key = cmp_to_key(compare_siblings(compare_tags, compare_leaves))
    item_key = cmp_to_key(compare_leaves)

    def walk(entry: TagNode) -> None:
        entry.children.sort(key=sibling_key)
        for child in entry.children:
            if isinstance(child, TagNode):
                walk(child)
        if entry.descendants is not None:
            entry.descendants.sort(key=item_key)

    walk(node)


__all__ = [
    "ITEM_ORDER_KEYS",
    "TAG_ORDER_KEYS",
    "ORDER_DIRECTIONS",
    "PIN_COUNT_OFFSET",
    "parse_sort_type",
    "text_sort_key",
    "compare_text",
    "tag_info_for",
    "compare_tag_nodes",
    "compare_items",
    "compare_siblings",
    "sort_tree",
]
