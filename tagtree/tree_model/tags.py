"""Tag-path helpers: ancestor chains, canonical tag strings, folded compares.

Tags compare case-insensitively but keep their original case for display.
Continuation segments produced by splitting ``a/b`` carry ``SUBTREE_MARK`` so
``["a", "→ b"]`` reads back as the single tag ``a/b``.
"""

from __future__ import annotations

from collections.abc import Iterable

TAG_SEPARATOR = "/"
SUBTREE_MARK = "→ "
ROOT_TAG = "root"
UNTAGGED_TAG = "_untagged"
UNLINKED_TAG = "_unlinked"
VIRTUAL_TAG_PREFIX = "_VIRTUAL_TAG_"
VIRTUAL_TAG_CANVAS = "_VIRTUAL_TAG_CANVAS"
VIRTUAL_TAG_FRESHNESS = "_VIRTUAL_TAG_FRESHNESS"


def fold_tag(tag: str) -> str:
    """Return the comparison form of ``tag``."""
    return tag.casefold()


def same_tag(a: str, b: str) -> bool:
    return fold_tag(a) == fold_tag(b)


def contains_tag(tags: Iterable[str], tag: str) -> bool:
    """Return whether ``tags`` holds ``tag`` under case-insensitive comparison."""
    folded = fold_tag(tag)
    return any(fold_tag(candidate) == folded for candidate in tags)


def unique(values: Iterable[str]) -> list[str]:
    """Drop exact duplicates while keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def unique_folded(values: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first spelling seen."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        folded = fold_tag(value)
        if folded in seen:
            continue
        seen.add(folded)
        out.append(value)
    return out


def is_subtree_tag(tag: str) -> bool:
    """Return whether ``tag`` is a continuation segment of a split tag."""
    return tag.startswith(SUBTREE_MARK)


def strip_subtree_mark(tag: str) -> str:
    return tag[len(SUBTREE_MARK):] if is_subtree_tag(tag) else tag


def is_virtual_tag(tag: str) -> bool:
    return tag.startswith(VIRTUAL_TAG_PREFIX)


def split_head(tag: str) -> tuple[str, str]:
    """Split ``a/b/c`` into ``("a", "→ b/c")``.

    A continuation head keeps its mark: ``"→ b/c"`` splits into
    ``("→ b", "→ c")``.
    """
    head, _sep, rest = tag.partition(TAG_SEPARATOR)
    return head, SUBTREE_MARK + rest


def ancestor_to_tags(ancestors: Iterable[str]) -> list[str]:
    """Fold continuation segments back into their parent tag.

    ``["root", "web", "→ css", "draft"]`` becomes ``["root", "web/css", "draft"]``.
    """
    tags: list[str] = []
    for segment in ancestors:
        if is_subtree_tag(segment) and tags:
            tags[-1] = tags[-1] + TAG_SEPARATOR + strip_subtree_mark(segment)
        else:
            tags.append(strip_subtree_mark(segment))
    return tags


def ancestor_to_longest_tag(tags: Iterable[str]) -> list[str]:
    """Drop tags that are prefixes of a later tag in the chain."""
    longest: list[str] = []
    for tag in reversed(list(tags)):
        if longest and longest[0].startswith(tag):
            continue
        longest.insert(0, tag)
    return longest


def canonical_tag(ancestors: list[str]) -> str:
    """Return the full tag string a node stands for (``""`` for the root)."""
    tags = ancestor_to_tags(ancestors[1:])
    return tags[-1] if tags else ""


def ancestor_tag_set(ancestors: list[str]) -> set[str]:
    """Folded tags already represented along an ancestor chain (root excluded)."""
    return {fold_tag(tag) for tag in ancestor_to_tags(ancestors[1:])}


def ancestor_prefix_set(ancestors: list[str]) -> set[str]:
    """Folded tags spelled by any leading part of an ancestor chain.

    ``["root", "work", "→ meeting", "→ work"]`` spells ``work``,
    ``work/meeting`` and ``work/meeting/work``.
    """
    spelled: set[str] = set()
    current = ""
    for segment in ancestors[1:]:
        if is_subtree_tag(segment) and current:
            current = current + TAG_SEPARATOR + strip_subtree_mark(segment)
        else:
            current = strip_subtree_mark(segment)
        spelled.add(fold_tag(current))
    return spelled


def parse_tag_list(value: object) -> tuple[str, ...]:
    """Normalize a comma string or a list into a tuple of lower-case tags."""
    if isinstance(value, str):
        raw = value.replace("\n", ",").split(",")
    elif isinstance(value, (list, tuple)):
        raw = [part for part in value if isinstance(part, str)]
    else:
        return ()
    return tuple(unique(part.strip().lower() for part in raw if part.strip()))


__all__ = [
    "TAG_SEPARATOR",
    "SUBTREE_MARK",
    "ROOT_TAG",
    "UNTAGGED_TAG",
    "UNLINKED_TAG",
    "VIRTUAL_TAG_PREFIX",
    "VIRTUAL_TAG_CANVAS",
    "VIRTUAL_TAG_FRESHNESS",
    "fold_tag",
    "same_tag",
    "contains_tag",
    "unique",
    "unique_folded",
    "is_subtree_tag",
    "strip_subtree_mark",
    "is_virtual_tag",
    "split_head",
    "ancestor_to_tags",
    "ancestor_to_longest_tag",
    "canonical_tag",
    "ancestor_tag_set",
    "ancestor_prefix_set",
    "parse_tag_list",
]
