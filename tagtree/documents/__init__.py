"""Host document records and their conversion into tree Items."""

from __future__ import annotations

from .records import DocumentRecord, load_records, records_from_json, resolved_links
from .items import build_items, matches_search, parse_search, seconds_to_freshness
from .links import build_link_items, linked_paths, referencing_paths

__all__ = [
    "DocumentRecord",
    "load_records",
    "records_from_json",
    "resolved_links",
    "build_items",
    "matches_search",
    "parse_search",
    "seconds_to_freshness",
    "build_link_items",
    "linked_paths",
    "referencing_paths",
]
