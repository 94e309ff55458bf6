"""Link-tree ingestion: folders are the documents an item links with."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from ..tree_model.tags import UNLINKED_TAG, unique
from ..tree_model.types import Item, TagInfo
from .items import build_items
from .records import DocumentRecord, resolved_links

if TYPE_CHECKING:
    from ..settings import TagTreeSettings


def linked_paths(links: Mapping[str, Mapping[str, int]]) -> dict[str, list[str]]:
    """Undirected neighbour lists: outgoing and incoming links merged."""
    neighbours: dict[str, list[str]] = {}
    for source, targets in links.items():
        for target, count in targets.items():
            if count <= 0 or target == source:
                continue
            neighbours.setdefault(source, []).append(target)
            neighbours.setdefault(target, []).append(source)
    return {path: unique(paths) for path, paths in neighbours.items()}


def referencing_paths(path: str, links: Mapping[str, Mapping[str, int]]) -> set[str]:
    """Documents that link to ``path``."""
    return {source for source, targets in links.items() if targets.get(path, 0) > 0 and source != path}


def build_link_items(
    records: Iterable[DocumentRecord],
    settings: "TagTreeSettings",
    tag_info: Mapping[str, TagInfo] | None = None,
    search_string: str = "",
    now: float | None = None,
) -> list[Item]:
    """Build Items whose folder labels are linked document paths.

    Folder scoping and the search filter still act on the document's tags;
    isolated documents are grouped under ``_unlinked``.
    """
    records = list(records)
    neighbours = linked_paths(resolved_links(records))
    items = build_items(
        records,
        settings.replace(disable_narrowing_down=False),
        tag_info,
        search_string,
        now,
    )
    return [
        dataclasses.replace(
            item,
            tags=tuple(neighbours.get(item.path, ())) or (UNLINKED_TAG,),
            extra_tags=item.tags,
        )
        for item in items
    ]


__all__ = ["linked_paths", "referencing_paths", "build_link_items"]
