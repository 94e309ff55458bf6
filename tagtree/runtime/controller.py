"""Incremental update controller for one tag-tree session.

Document changes are debounced, diffed against the last-known records, and
only turn into a rebuild when tree inputs actually changed. Every change to
the tree runs on a private root, one at a time, and is swapped in on
completion. A published root is never mutated, so readers and subscribers
only see completed trees.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping

from ..documents.items import build_items
from ..documents.links import build_link_items, referencing_paths
from ..documents.records import DocumentRecord, resolved_links
from ..errors import TagInfoError
from ..settings import TagTreeSettings
from ..state import SessionState
from ..tag_info import serialize_tag_info
from ..tree_model.expansion import open_folder, sorted_expanded_folders
from ..tree_model.pipeline import build_tree, finalize_tree, resort_tree
from ..tree_model.types import TagInfo, TagInfoDict, TagNode
from ..watch import build_corpus_signature, build_input_signature
from .debounce import DebounceQueue, TimerFactory
from .store import DocumentStore

logger = logging.getLogger(__name__)

TreeCallback = Callable[[TagNode], None]


def _links_changed(previous: DocumentRecord | None, current: DocumentRecord) -> bool:
    previous_links = set(previous.links) if previous is not None else set()
    return previous_links != set(current.links)


class TagTreeController:
    """Own the document cache, the current tree, and the expanded-folder set."""

    def __init__(
        self,
        store: DocumentStore,
        settings: TagTreeSettings | None = None,
        *,
        tag_info: Mapping[str, TagInfo] | None = None,
        expanded_folders: Iterable[str] | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        settings = settings or TagTreeSettings()
        self._store = store
        self._tag_info_from_store = tag_info is None
        self._state = SessionState(
            settings=settings,
            tag_info=dict(tag_info or {}),
            expanded_folders=sorted_expanded_folders(expanded_folders or ()),
        )
        self._lock = threading.Lock()
        self._rebuild_lock = threading.Lock()
        self._subscribers: list[TreeCallback] = []
        self._queue = DebounceQueue(settings.scan_delay_seconds, self._apply_diffs, timer_factory=timer_factory)
        self.rebuild_count = 0
        self.last_error: Exception | None = None

    @property
    def settings(self) -> TagTreeSettings:
        with self._lock:
            return self._state.settings

    @property
    def search_string(self) -> str:
        with self._lock:
            return self._state.search_string

    def start(self) -> TagNode | None:
        """Read the whole store, build the first tree, and return it."""
        records = self._store.list_documents()
        tag_info = self._load_store_tag_info() if self._tag_info_from_store else None
        with self._lock:
            self._state.records = {record.path: record for record in records}
            if tag_info is not None:
                self._state.tag_info = tag_info
        self._rebuild(force=True)
        return self.current_tree()

    def close(self) -> None:
        self._queue.cancel()
        with self._lock:
            self._subscribers.clear()

    def on_document_changed(self, path: str) -> None:
        self._queue.add(path)

    def on_document_renamed_or_deleted(self, path: str) -> None:
        """Schedule a full relist; renames and deletions invalidate paths."""
        with self._lock:
            self._state.relist_pending = True
        self._queue.add(path)

    def flush(self) -> bool:
        """Apply queued changes now instead of waiting for the timer."""
        batch = self._queue.drain()
        with self._lock:
            relist = self._state.relist_pending
        if not batch and not relist:
            return False
        return self._apply_diffs(batch)

    def request_rebuild(self) -> bool:
        """Rebuild unconditionally from the current document cache."""
        return self._rebuild(force=True)

    def current_tree(self) -> TagNode | None:
        with self._lock:
            return self._state.root

    def set_expanded(self, key: str, expanded: bool) -> None:
        """Record a folder as opened or closed.

        Opening materializes the folder on a copy of the current tree and
        publishes the copy.
        """
        with self._lock:
            folders = [folder for folder in self._state.expanded_folders if folder != key]
            if expanded:
                folders.append(key)
            self._state.expanded_folders = sorted_expanded_folders(folders)
        if not expanded:
            return
        with self._rebuild_lock:
            with self._lock:
                root = self._state.root
                settings = self._state.settings
                tag_info = dict(self._state.tag_info)
            if root is None:
                return
            root = copy.deepcopy(root)
            open_folder(root, key, settings)
            finalize_tree(root, settings, tag_info)
            with self._lock:
                self._state.root = root
        self._notify(root)

    def set_search_string(self, search_string: str) -> bool:
        with self._lock:
            if search_string == self._state.search_string:
                return False
            self._state.search_string = search_string
        return self._rebuild()

    def set_settings(self, settings: TagTreeSettings) -> bool:
        with self._lock:
            self._state.settings = settings
        self._queue.set_delay(settings.scan_delay_seconds)
        return self._rebuild()

    def set_sort_settings(self, sort_type: str | None = None, sort_type_tag: str | None = None) -> None:
        """Change ordering only; a re-sorted copy of the tree replaces it."""
        changes = {
            name: value
            for name, value in (("sort_type", sort_type), ("sort_type_tag", sort_type_tag))
            if value is not None
        }
        if not changes:
            return
        with self._rebuild_lock:
            with self._lock:
                was_current = self._state.last_input_signature == self._input_signature_locked()
                settings = TagTreeSettings.from_mapping({**self._state.settings.to_dict(), **changes})
                self._state.settings = settings
                if was_current:
                    self._state.last_input_signature = self._input_signature_locked()
                root = self._state.root
                tag_info = dict(self._state.tag_info)
            if root is None:
                return
            root = copy.deepcopy(root)
            resort_tree(root, settings, tag_info)
            with self._lock:
                self._state.root = root
        self._notify(root)

    def set_tag_info(self, tag_info: Mapping[str, TagInfo]) -> bool:
        with self._lock:
            self._state.tag_info = dict(tag_info)
        return self._rebuild()

    def subscribe(self, callback: TreeCallback) -> Callable[[], None]:
        """Register ``callback`` for completed trees; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def serialized_expanded_folders(self) -> list[str]:
        with self._lock:
            return list(self._state.expanded_folders)

    def restore_expanded_folders(self, expanded_folders: Iterable[str]) -> None:
        with self._lock:
            self._state.expanded_folders = sorted_expanded_folders(expanded_folders)
            has_tree = self._state.root is not None
        if has_tree:
            self._rebuild(force=True)

    def serialized_tag_info(self) -> dict[str, dict[str, str]]:
        with self._lock:
            return serialize_tag_info(self._state.tag_info)

    def _load_store_tag_info(self) -> TagInfoDict:
        try:
            return dict(self._store.load_tag_info())
        except (TagInfoError, OSError) as exc:
            logger.warning("ignoring unreadable tag info: %s", exc)
            return {}

    def _apply_diffs(self, batch: list[str]) -> bool:
        """Fold a batch of changed paths into the cache and rebuild if needed."""
        with self._lock:
            if self._state.rebuilding:
                self._queue.requeue(batch)
                return False
            relist = self._state.relist_pending
            self._state.relist_pending = False

        if relist:
            records = {record.path: record for record in self._store.list_documents()}
            with self._lock:
                self._state.records = records
        else:
            self._diff_documents(batch)
        return self._rebuild()

    def _diff_documents(self, batch: list[str]) -> None:
        with self._lock:
            link_mode = self._state.settings.is_link_tree
        sources = set(batch)
        processed: set[str] = set()
        queue = list(batch)
        while queue:
            path = queue.pop(0)
            if path in processed:
                continue
            processed.add(path)
            record = self._store.get_document(path)
            with self._lock:
                previous = self._state.records.get(path)
                if record is None:
                    if previous is not None:
                        logger.debug("document %s is missing; keeping last-known record", path)
                    continue
                self._state.records[path] = record
                snapshot = list(self._state.records.values()) if link_mode else []
            if link_mode and path in sources and _links_changed(previous, record):
                neighbours = set(record.links) | referencing_paths(path, resolved_links(snapshot))
                if previous is not None:
                    neighbours |= set(previous.links)
                queue.extend(sorted(neighbours - processed))

    def _input_signature_locked(self) -> str:
        state = self._state
        return build_input_signature(
            build_corpus_signature(state.records),
            state.settings.signature(),
            state.search_string,
            json.dumps(serialize_tag_info(state.tag_info), sort_keys=True),
        )

    def _rebuild(self, force: bool = False) -> bool:
        """Run the pipeline unless every input matches the last build."""
        with self._rebuild_lock:
            with self._lock:
                state = self._state
                signature = self._input_signature_locked()
                if not force and signature == state.last_input_signature:
                    logger.debug("document diff left tree inputs unchanged; skipping rebuild")
                    return False
                state.rebuilding = True
                records = list(state.records.values())
                settings = state.settings
                tag_info = dict(state.tag_info)
                search_string = state.search_string
                expanded_folders = list(state.expanded_folders)

            started = time.perf_counter()
            try:
                ingest = build_link_items if settings.is_link_tree else build_items
                items = ingest(records, settings, tag_info, search_string)
                root = build_tree(items, settings, tag_info, expanded_folders)
            except Exception as exc:
                logger.exception("tag tree rebuild failed; keeping the previous tree")
                with self._lock:
                    state.rebuilding = False
                    self.last_error = exc
                self._queue.rearm()
                return False

            with self._lock:
                state.root = root
                state.last_input_signature = signature
                state.rebuilding = False
                self.rebuild_count += 1
                self.last_error = None
            logger.debug(
                "rebuilt tag tree from %d documents in %.1f ms",
                len(records),
                (time.perf_counter() - started) * 1000.0,
            )

        self._notify(root)
        self._queue.rearm()
        return True

    def _notify(self, root: TagNode) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(root)
            except Exception:
                logger.exception("tree subscriber failed")


__all__ = ["TagTreeController", "TreeCallback"]
