"""Coalescing queue for document-change notifications."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class DebounceQueue:
    """Collect changed paths and flush them as one batch after a quiet period.

    Every ``add`` restarts the timer, so a burst of changes produces a single
    flush. Paths are de-duplicated and keep first-seen order.
    """

    def __init__(
        self,
        delay: float,
        flush_callback: Callable[[list[str]], None],
        *,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        if delay < 0:
            raise ValueError("debounce delay must be non-negative")
        self._delay = delay
        self._flush_callback = flush_callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: dict[str, None] = {}
        self._timer: threading.Timer | None = None

    @property
    def delay(self) -> float:
        return self._delay

    def set_delay(self, delay: float) -> None:
        with self._lock:
            self._delay = max(0.0, delay)

    def pending(self) -> list[str]:
        with self._lock:
            return list(self._pending)

    def add(self, path: str) -> None:
        """Queue ``path`` and (re)arm the timer."""
        with self._lock:
            self._pending[path] = None
            self._arm_locked()

    def requeue(self, paths: Iterable[str]) -> None:
        """Put paths back without arming; ``rearm`` starts the next cycle."""
        with self._lock:
            for path in paths:
                self._pending[path] = None

    def rearm(self) -> bool:
        """Start another cycle when paths are waiting; return whether one started."""
        with self._lock:
            if not self._pending:
                return False
            self._arm_locked()
            return True

    def drain(self) -> list[str]:
        """Cancel the timer and return every queued path."""
        with self._lock:
            self._cancel_locked()
            batch = list(self._pending)
            self._pending.clear()
        return batch

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._pending.clear()

    def _arm_locked(self) -> None:
        self._cancel_locked()
        timer = self._timer_factory(self._delay, self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
            batch = list(self._pending)
            self._pending.clear()
        if not batch:
            return
        logger.debug("flushing %d queued document changes", len(batch))
        self._flush_callback(batch)


__all__ = ["DebounceQueue", "TimerFactory"]
