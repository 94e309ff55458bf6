from __future__ import annotations

from dataclasses import dataclass, field

from .documents.records import DocumentRecord
from .settings import TagTreeSettings
from .tree_model.types import TagInfoDict, TagNode


@dataclass
class SessionState:
    settings: TagTreeSettings
    records: dict[str, DocumentRecord] = field(default_factory=dict)
    tag_info: TagInfoDict = field(default_factory=dict)
    expanded_folders: list[str] = field(default_factory=list)
    search_string: str = ""
    root: TagNode | None = None
    last_input_signature: str | None = None
    relist_pending: bool = False
    rebuilding: bool = False
