"""Change signatures for document snapshots.

Computes cheap hashes over the tree-relevant content of documents (path, tags,
links). The controller compares these signatures to decide whether a diff
batch warrants a rebuild; metadata churn such as a new mtime does not.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping

from .documents.records import DocumentRecord


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def build_record_signature(record: DocumentRecord | None) -> str:
    """Digest of one record's tags and links; ``missing`` for absent documents."""
    digest = hashlib.blake2b(digest_size=20)
    if record is None:
        _update_digest(digest, "missing")
        return digest.hexdigest()
    _update_digest(digest, f"path:{record.path}")
    for tag in record.tags:
        _update_digest(digest, f"tag:{tag}")
    for link in record.links:
        _update_digest(digest, f"link:{link}")
    return digest.hexdigest()


def build_corpus_signature(records: Iterable[DocumentRecord] | Mapping[str, DocumentRecord]) -> str:
    """Digest over every record, independent of input order."""
    if isinstance(records, Mapping):
        records = records.values()
    digest = hashlib.blake2b(digest_size=20)
    for record in sorted(records, key=lambda entry: entry.path):
        _update_digest(digest, build_record_signature(record))
    return digest.hexdigest()


def build_input_signature(corpus_signature: str, settings_signature: str, search_string: str, tag_info_signature: str) -> str:
    """Combine every effective build input into one digest."""
    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"corpus:{corpus_signature}")
    _update_digest(digest, f"settings:{settings_signature}")
    _update_digest(digest, f"search:{search_string}")
    _update_digest(digest, f"tag_info:{tag_info_signature}")
    return digest.hexdigest()


__all__ = [
    "build_record_signature",
    "build_corpus_signature",
    "build_input_signature",
]
