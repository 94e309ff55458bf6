"""Raw document records as supplied by the host document store."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def _string_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (list, tuple)):
        return tuple(part for part in value if isinstance(part, str) and part)
    return ()


def _number(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


@dataclass(frozen=True)
class DocumentRecord:
    """One document as last seen in the store.

    ``tags`` are taken verbatim (leading ``#`` allowed); ``links`` are paths
    of documents this one links to.
    """

    path: str
    tags: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    title: str | None = None
    mtime: float = 0.0
    ctime: float = 0.0

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def basename(self) -> str:
        """File name without its last extension."""
        name = self.filename
        stem, dot, _ext = name.rpartition(".")
        return stem if dot and stem else name

    @property
    def extension(self) -> str:
        _stem, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "DocumentRecord":
        """Build a record from untrusted JSON data.

        Raises:
            ValueError: If ``path`` is missing or not a non-empty string.
        """
        path = data.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError("document record requires a non-empty 'path'")
        title = data.get("title")
        return cls(
            path=path,
            tags=_string_tuple(data.get("tags")),
            links=_string_tuple(data.get("links")),
            title=title if isinstance(title, str) and title else None,
            mtime=_number(data.get("mtime")),
            ctime=_number(data.get("ctime")),
        )

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"path": self.path, "tags": list(self.tags), "links": list(self.links)}
        if self.title is not None:
            out["title"] = self.title
        out["mtime"] = self.mtime
        out["ctime"] = self.ctime
        return out


def records_from_json(data: object) -> list[DocumentRecord]:
    """Convert a decoded JSON list into records, skipping malformed entries."""
    if isinstance(data, Mapping):
        data = data.get("documents")
    if not isinstance(data, list):
        raise ValueError("expected a JSON list of document records")
    records: list[DocumentRecord] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, Mapping):
            logger.warning("skipping document #%d: not an object", index)
            continue
        try:
            records.append(DocumentRecord.from_mapping(entry))
        except ValueError as exc:
            logger.warning("skipping document #%d: %s", index, exc)
    return records


def load_records(path: Path) -> list[DocumentRecord]:
    """Read document records from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If it does not hold a JSON list (or ``{"documents": [...]}``).
    """
    return records_from_json(json.loads(path.read_text(encoding="utf-8")))


def resolved_links(records: Iterable[DocumentRecord]) -> dict[str, dict[str, int]]:
    """Outgoing link counts per source path, restricted to known documents."""
    records = list(records)
    known = {record.path for record in records}
    out: dict[str, dict[str, int]] = {}
    for record in records:
        targets: dict[str, int] = {}
        for link in record.links:
            if link in known:
                targets[link] = targets.get(link, 0) + 1
        out[record.path] = targets
    return out


__all__ = [
    "DocumentRecord",
    "records_from_json",
    "load_records",
    "resolved_links",
]
