"""Conversion of raw document records into tree Items.

Applies folder scoping, tag redirects, virtual tags, document/tag ignore
lists, and the search filter. The resulting Items are what the tree pipeline
consumes.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from ..tag_info import tag_redirects
from ..tree_model.tags import (
    TAG_SEPARATOR,
    UNTAGGED_TAG,
    VIRTUAL_TAG_CANVAS,
    VIRTUAL_TAG_FRESHNESS,
    fold_tag,
    unique,
)
from ..tree_model.types import Item, TagInfo
from .records import DocumentRecord

if TYPE_CHECKING:
    from ..settings import TagTreeSettings

HOUR = 60 * 60
DAY = HOUR * 24

FRESHNESS_BUCKETS = (
    (HOUR, "FRESHNESS_01"),
    (HOUR * 6, "FRESHNESS_02"),
    (DAY * 3, "FRESHNESS_03"),
    (DAY * 7, "FRESHNESS_04"),
)
FRESHNESS_OLDEST = "FRESHNESS_05"


def seconds_to_freshness(elapsed: float) -> str:
    """Bucket an age in seconds into a sortable freshness label."""
    for limit, label in FRESHNESS_BUCKETS:
        if elapsed < limit:
            return label
    return FRESHNESS_OLDEST


def parse_search(search_string: str) -> list[list[str]]:
    """Split a search string into alternatives of lower-cased terms.

    ``|`` separates alternatives and whitespace separates terms within one.
    """
    alternatives = []
    for alternative in search_string.lower().split("|"):
        terms = [term for term in alternative.split() if term and term != "-"]
        if terms:
            alternatives.append(terms)
    return alternatives


def matches_search(tags: Iterable[str], alternatives: list[list[str]]) -> bool:
    """Return whether ``tags`` satisfy at least one search alternative."""
    if not alternatives:
        return True
    lowered = [tag.lower() for tag in tags]
    for terms in alternatives:
        failed = False
        for term in terms:
            if term.startswith("-"):
                if any(term[1:] in tag for tag in lowered):
                    failed = True
            elif not any(term in tag for tag in lowered):
                failed = True
        if not failed:
            return True
    return False


def display_name(record: DocumentRecord, settings: "TagTreeSettings") -> str:
    name = (record.title if settings.use_title else None) or record.basename
    folder = record.path.rpartition("/")[0]
    if settings.display_method == "NAME : PATH":
        return f"{name} : {folder}"
    if settings.display_method == "PATH/NAME":
        return f"{folder}/{name}"
    return name


def _in_scope(path: str, settings: "TagTreeSettings") -> bool:
    folded = path.lower()
    targets = [folder.lower() for folder in settings.target_folders]
    if targets and not any(folded.startswith(folder) for folder in targets):
        return False
    return not any(folded.startswith(folder.lower()) for folder in settings.ignore_folders)


def document_tags(
    record: DocumentRecord,
    settings: "TagTreeSettings",
    redirects: Mapping[str, str],
    now: float,
) -> list[str]:
    """Resolve the tag list of one document before search and ignore filters."""
    tags = unique(tag[1:] if tag.startswith("#") else tag for tag in record.tags)
    tags = unique(redirects.get(fold_tag(tag), tag) for tag in tags if tag)
    if settings.disable_nested_tags:
        tags = unique(part for tag in tags for part in tag.split(TAG_SEPARATOR) if part)
    if not tags:
        tags = [UNTAGGED_TAG]
    if record.extension == "canvas":
        tags.append(VIRTUAL_TAG_CANVAS)
    if settings.use_virtual_tag:
        tags.append(f"{VIRTUAL_TAG_FRESHNESS}{TAG_SEPARATOR}{seconds_to_freshness(now - record.mtime)}")
    return tags


def build_items(
    records: Iterable[DocumentRecord],
    settings: "TagTreeSettings",
    tag_info: Mapping[str, TagInfo] | None = None,
    search_string: str = "",
    now: float | None = None,
) -> list[Item]:
    """Turn document records into Items for the tag tree."""
    now = time.time() if now is None else now
    redirects = tag_redirects(tag_info or {})
    alternatives = parse_search(search_string)
    ignore_doc_tags = set(settings.ignore_doc_tags)
    ignore_tags = set(settings.ignore_tags)
    archive_tags = set(settings.archive_tags)

    items: list[Item] = []
    for record in records:
        if not _in_scope(record.path, settings):
            continue
        tags = document_tags(record, settings, redirects, now)
        if any(tag.lower() in ignore_doc_tags for tag in tags):
            continue
        if not matches_search(tags, alternatives):
            continue
        tags = [tag for tag in tags if tag.lower() not in ignore_tags] or [UNTAGGED_TAG]

        common = {
            "path": record.path,
            "links": record.links,
            "display_name": display_name(record, settings),
            "filename": record.basename,
            "mtime": record.mtime,
            "ctime": record.ctime,
        }
        if settings.disable_narrowing_down:
            archived = [tag for tag in tags if tag.lower() in archive_tags]
            for tag in archived or tags:
                extra = tuple(other for other in tags if other != tag)
                items.append(Item(tags=(tag,), extra_tags=extra, **common))
        else:
            items.append(Item(tags=tuple(tags), **common))
    return items


__all__ = [
    "FRESHNESS_BUCKETS",
    "seconds_to_freshness",
    "parse_search",
    "matches_search",
    "display_name",
    "document_tags",
    "build_items",
]
