"""Host document store interface and an in-memory implementation."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Iterable
from typing import Protocol

from ..documents.records import DocumentRecord
from ..tree_model.types import TagInfoDict


class DocumentStore(Protocol):
    """What the controller pulls from the host."""

    def list_documents(self) -> list[DocumentRecord]: ...

    def get_document(self, path: str) -> DocumentRecord | None: ...

    def load_tag_info(self) -> TagInfoDict: ...


class InMemoryDocumentStore:
    """Thread-safe dict-backed store used by the CLI and tests."""

    def __init__(self, records: Iterable[DocumentRecord] = (), tag_info: TagInfoDict | None = None) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, DocumentRecord] = {record.path: record for record in records}
        self._tag_info: TagInfoDict = dict(tag_info or {})

    def list_documents(self) -> list[DocumentRecord]:
        with self._lock:
            return list(self._records.values())

    def get_document(self, path: str) -> DocumentRecord | None:
        with self._lock:
            return self._records.get(path)

    def load_tag_info(self) -> TagInfoDict:
        with self._lock:
            return dict(self._tag_info)

    def put(self, record: DocumentRecord) -> None:
        with self._lock:
            self._records[record.path] = record

    def remove(self, path: str) -> DocumentRecord | None:
        with self._lock:
            return self._records.pop(path, None)

    def rename(self, old_path: str, new_path: str) -> None:
        with self._lock:
            record = self._records.pop(old_path, None)
            if record is not None:
                self._records[new_path] = dataclasses.replace(record, path=new_path)

    def set_tag_info(self, tag_info: TagInfoDict) -> None:
        with self._lock:
            self._tag_info = dict(tag_info)


__all__ = ["DocumentStore", "InMemoryDocumentStore"]
