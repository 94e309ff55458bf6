"""Pin/override table stored as YAML front matter of a Markdown file.

The front matter maps a tag to ``{key, mark, alt, redirect}``. Any other keys
are dropped on load; the Markdown body after the front matter is kept intact
when the table is written back.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

from .errors import TagInfoError
from .tree_model.tags import fold_tag
from .tree_model.types import TagInfo, TagInfoDict

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
TAG_INFO_FIELDS = ("key", "mark", "alt", "redirect")


def split_front_matter(text: str) -> tuple[str | None, str]:
    """Return ``(yaml_text, body)``; ``yaml_text`` is ``None`` without front matter."""
    if not text.startswith(FRONT_MATTER_DELIMITER):
        return None, text
    end = text.find("\n" + FRONT_MATTER_DELIMITER, len(FRONT_MATTER_DELIMITER))
    if end == -1:
        return None, text
    yaml_text = text[len(FRONT_MATTER_DELIMITER):end]
    body = text[end + 1 + len(FRONT_MATTER_DELIMITER):]
    if body.startswith("\n"):
        body = body[1:]
    return yaml_text, body


def tag_info_from_mapping(data: Mapping[object, object]) -> TagInfoDict:
    """Keep only well-formed entries with at least one known field."""
    table: TagInfoDict = {}
    for tag, raw in data.items():
        if not isinstance(tag, str) or not isinstance(raw, Mapping):
            continue
        fields = {
            name: str(raw[name])
            for name in TAG_INFO_FIELDS
            if name in raw and raw[name] is not None
        }
        if not fields:
            continue
        table[tag] = TagInfo(**fields)
    return table


def parse_tag_info(text: str) -> tuple[TagInfoDict, str]:
    """Parse a pin table document strictly.

    Raises:
        TagInfoError: If the front matter is not valid YAML or not a mapping.
    """
    yaml_text, body = split_front_matter(text)
    if yaml_text is None:
        return {}, body
    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as exc:
        raise TagInfoError(f"invalid tag info front matter: {exc}") from exc
    if data is None:
        return {}, body
    if not isinstance(data, Mapping):
        raise TagInfoError("tag info front matter must be a mapping")
    return tag_info_from_mapping(data), body


def load_tag_info(path: Path) -> TagInfoDict:
    """Load the table from ``path``, returning ``{}`` when missing or malformed."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        logger.warning("cannot read tag info %s: %s", path, exc)
        return {}
    try:
        table, _body = parse_tag_info(text)
    except TagInfoError as exc:
        logger.warning("ignoring tag info %s: %s", path, exc)
        return {}
    logger.debug("loaded %d tag info entries from %s", len(table), path)
    return table


def serialize_tag_info(table: Mapping[str, TagInfo]) -> dict[str, dict[str, str]]:
    return {tag: info.to_dict() for tag, info in table.items() if info.to_dict()}


def render_tag_info(table: Mapping[str, TagInfo], body: str = "") -> str:
    dumped = yaml.safe_dump(serialize_tag_info(table), allow_unicode=True, sort_keys=True)
    if dumped.strip() == "{}":
        dumped = ""
    return f"{FRONT_MATTER_DELIMITER}\n{dumped}{FRONT_MATTER_DELIMITER}\n{body}"


def save_tag_info(path: Path, table: Mapping[str, TagInfo]) -> None:
    """Write ``table`` into the front matter of ``path``, keeping its body."""
    body = ""
    try:
        _yaml_text, body = split_front_matter(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        pass
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_tag_info(table, body), encoding="utf-8")


def tag_redirects(table: Mapping[str, TagInfo]) -> dict[str, str]:
    """Map folded source tags to their redirect targets."""
    return {fold_tag(tag): info.redirect for tag, info in table.items() if info.redirect}


__all__ = [
    "TAG_INFO_FIELDS",
    "split_front_matter",
    "tag_info_from_mapping",
    "parse_tag_info",
    "load_tag_info",
    "serialize_tag_info",
    "render_tag_info",
    "save_tag_info",
    "tag_redirects",
]
