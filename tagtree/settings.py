"""Tag-tree settings with defensive coercion from persisted JSON."""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from .tree_model.descendants import HIDE_ITEMS_TYPES, HIDE_NONE
from .tree_model.sorting import ITEM_ORDER_KEYS, ORDER_DIRECTIONS, TAG_ORDER_KEYS
from .tree_model.tags import parse_tag_list

logger = logging.getLogger(__name__)

DISPLAY_METHODS = ("NAME", "PATH/NAME", "NAME : PATH")
TREE_TYPES = ("tags", "links")
TAG_LIST_FIELDS = ("ignore_doc_tags", "ignore_tags", "archive_tags")
FOLDER_LIST_FIELDS = ("ignore_folders", "target_folders")

_HIDE_ITEMS_ALIASES = {
    "DEDICATED_INTERMEDIATES": "DEDICATED_INTERMIDIATES",
    "DEDICATED_INTERMIEDIATES": "DEDICATED_INTERMIDIATES",
}
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class TagTreeSettings:
    """Every option that shapes ingestion, construction, and ordering."""

    display_method: str = "NAME"
    use_title: bool = True
    ignore_doc_tags: tuple[str, ...] = ()
    ignore_tags: tuple[str, ...] = ()
    ignore_folders: tuple[str, ...] = ()
    target_folders: tuple[str, ...] = ()
    archive_tags: tuple[str, ...] = ()
    sort_type: str = "DISPNAME_ASC"
    sort_type_tag: str = "NAME_ASC"
    expand_limit: int = 0
    disable_nested_tags: bool = False
    hide_items: str = HIDE_NONE
    scan_delay: int = 250
    reduce_nested_parent: bool = True
    merge_redundant_combination: bool = False
    use_virtual_tag: bool = False
    disable_narrowing_down: bool = False
    expand_untagged_to_root: bool = False
    tree_type: str = "tags"

    @property
    def is_link_tree(self) -> bool:
        return self.tree_type == "links"

    @property
    def scan_delay_seconds(self) -> float:
        return self.scan_delay / 1000.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "TagTreeSettings":
        """Build settings from an untrusted mapping.

        Keys may be snake_case or camelCase. Values of the wrong type fall back
        to defaults; tag and folder lists accept comma strings or lists.
        """
        if not isinstance(data, Mapping):
            return cls()
        defaults = cls()
        values: dict[str, object] = {}
        names = {field.name for field in dataclasses.fields(cls)}
        for raw_key, raw_value in data.items():
            if not isinstance(raw_key, str):
                continue
            name = _CAMEL_RE.sub("_", raw_key).lower()
            if name not in names:
                continue
            coerced = _coerce(name, raw_value, getattr(defaults, name))
            if coerced is not None:
                values[name] = coerced
        return cls(**values)

    def to_dict(self) -> dict[str, object]:
        out = dataclasses.asdict(self)
        for name in (*TAG_LIST_FIELDS, *FOLDER_LIST_FIELDS):
            out[name] = list(out[name])
        return out

    def signature(self) -> str:
        """Stable serialized form used to detect effective settings changes."""
        return json.dumps(self.to_dict(), sort_keys=True)

    def replace(self, **changes: object) -> "TagTreeSettings":
        return dataclasses.replace(self, **changes)


def _parse_folder_list(value: object) -> tuple[str, ...] | None:
    if isinstance(value, str):
        raw = value.replace("\n", ",").split(",")
    elif isinstance(value, (list, tuple)):
        raw = [part for part in value if isinstance(part, str)]
    else:
        return None
    return tuple(part.strip() for part in raw if part.strip())


def _normalize_sort_type(value: str, keys: object) -> str | None:
    key, _sep, direction = value.upper().rpartition("_")
    if key in keys and direction in ORDER_DIRECTIONS:
        return f"{key}_{direction}"
    return None


def _coerce(name: str, value: object, default: object) -> object | None:
    """Return a valid value for ``name`` or ``None`` to keep the default."""
    if name in TAG_LIST_FIELDS:
        return parse_tag_list(value) if isinstance(value, (str, list, tuple)) else None
    if name in FOLDER_LIST_FIELDS:
        return _parse_folder_list(value)
    if isinstance(default, bool):
        return value if isinstance(value, bool) else None
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return None
        return value
    if not isinstance(value, str):
        return None

    if name == "hide_items":
        normalized = _HIDE_ITEMS_ALIASES.get(value.upper(), value.upper())
        if normalized in HIDE_ITEMS_TYPES:
            return normalized
    elif name == "sort_type":
        normalized = _normalize_sort_type(value, ITEM_ORDER_KEYS)
        if normalized is not None:
            return normalized
    elif name == "sort_type_tag":
        normalized = _normalize_sort_type(value, TAG_ORDER_KEYS)
        if normalized is not None:
            return normalized
    elif name == "display_method":
        if value in DISPLAY_METHODS:
            return value
    elif name == "tree_type":
        if value.lower() in TREE_TYPES:
            return value.lower()
    else:
        return value
    logger.warning("ignoring invalid %s value %r", name, value)
    return None


__all__ = [
    "DISPLAY_METHODS",
    "TREE_TYPES",
    "TagTreeSettings",
]
