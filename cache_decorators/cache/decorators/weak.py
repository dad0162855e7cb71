"""
Weak reference cache decorator.

Values are stored behind weak references so the garbage collector may
reclaim them once nothing else refers to them. Reclaimed entries are
reported on a queue and their keys are dropped from the underlying cache the
next time the decorator is used. A bounded buffer of strong references to
recently read values keeps a hot working set alive.
"""

from __future__ import annotations

import logging
import queue
import threading
import weakref
from collections import deque
from collections.abc import Hashable
from typing import Any, Deque, Dict, List, Optional

from ..base import Cache

logger = logging.getLogger(__name__)

DEFAULT_RECENCY_CAPACITY = 256


class WeakEntry(weakref.ref):
    """Weak reference to a cached value that remembers its key."""

    __slots__ = ("key",)

    def __new__(cls, key, value, callback=None):
        return super().__new__(cls, value, callback)

    def __init__(self, key: Hashable, value: Any, callback=None) -> None:
        super().__init__(value, callback)
        self.key = key


class WeakCache:
    """
    Cache decorator that holds values weakly.

    The underlying cache stores a :class:`WeakEntry` per key. Reads of live
    values push them to the front of the recency buffer; the buffer holds at
    most :attr:`recency_capacity` strong references, independent of keys.

    A reclaimed value removes its key only while that key still maps to the
    value's own entry, so a late notice never drops a newer value.

    When wrapping a :class:`BlockingCache`, purging a key goes through its
    ``remove`` and so also releases a population lock the calling thread
    holds on that key.
    """

    def __init__(
        self, delegate: Cache, recency_capacity: int = DEFAULT_RECENCY_CAPACITY
    ) -> None:
        """
        Initialize the decorator.

        Parameters
        ----------
        delegate : Cache
            Underlying cache to decorate
        recency_capacity : int
            Number of recently read values kept strongly reachable.
            ``0`` retains nothing beyond the callers' own references.
        """
        self._delegate = delegate
        self._recent: Deque[Any] = deque()
        self._recent_lock = threading.Lock()
        # SimpleQueue.put is safe to call from a GC callback
        self._reclaimed: "queue.SimpleQueue[WeakEntry]" = queue.SimpleQueue()
        # latest entry written per key; guards purges against stale notices
        self._entries: Dict[Hashable, WeakEntry] = {}
        self._entries_lock = threading.Lock()
        self._recency_capacity = 0
        self.recency_capacity = recency_capacity

    @property
    def id(self) -> str:
        return self._delegate.id

    @property
    def delegate(self) -> Cache:
        return self._delegate

    @property
    def recency_capacity(self) -> int:
        """Capacity of the recency buffer (not of the underlying cache)."""
        return self._recency_capacity

    @recency_capacity.setter
    def recency_capacity(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"recency_capacity must be >= 0, got {value}")
        with self._recent_lock:
            self._recency_capacity = value
            while len(self._recent) > value:
                self._recent.pop()

    def size(self) -> int:
        self._remove_garbage_collected_items()
        return self._delegate.size()

    def put(self, key: Hashable, value: Any) -> None:
        """Store a weak reference to `value` under `key`.

        Raises
        ------
        TypeError
            If `value` does not support weak references (e.g. ``int``,
            ``str``, ``tuple``)
        """
        self._remove_garbage_collected_items()
        try:
            entry = WeakEntry(key, value, self._reclaimed.put)
        except TypeError as exc:
            raise TypeError(
                f"cannot cache {type(value).__name__!r} value in {self.id}: "
                "values must support weak references"
            ) from exc
        with self._entries_lock:
            previous = self._entries.get(key)
            self._entries[key] = entry
            try:
                self._delegate.put(key, entry)
            except Exception:
                if previous is None:
                    del self._entries[key]
                else:
                    self._entries[key] = previous
                raise

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._delegate.get(key)
        if entry is None:
            return None
        value = entry()
        if value is None:
            # reclaimed before its callback was drained
            with self._entries_lock:
                current = self._entries.get(key)
                if current is None or current is entry:
                    self._entries.pop(key, None)
                    self._delegate.remove(key)
            return None
        with self._recent_lock:
            self._recent.appendleft(value)
            while len(self._recent) > self._recency_capacity:
                self._recent.pop()
        return value

    def remove(self, key: Hashable) -> Optional[Any]:
        self._remove_garbage_collected_items()
        with self._entries_lock:
            self._entries.pop(key, None)
            entry = self._delegate.remove(key)
        return entry() if entry is not None else None

    def clear(self) -> None:
        with self._recent_lock:
            self._recent.clear()
        self._remove_garbage_collected_items()
        with self._entries_lock:
            self._entries.clear()
            self._delegate.clear()

    def recent_values(self) -> List[Any]:
        """Snapshot of the recency buffer, most recently read first."""
        with self._recent_lock:
            return list(self._recent)

    def _remove_garbage_collected_items(self) -> int:
        removed = 0
        while True:
            try:
                entry = self._reclaimed.get_nowait()
            except queue.Empty:
                break
            with self._entries_lock:
                if self._entries.get(entry.key) is not entry:
                    continue
                del self._entries[entry.key]
                self._delegate.remove(entry.key)
            removed += 1
        if removed:
            logger.debug(
                "weak_cache.purged",
                extra={"cache_id": self.id, "removed": removed},
            )
        return removed
