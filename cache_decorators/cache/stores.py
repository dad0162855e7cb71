"""In-memory cache stores.

This module provides a thin, thread-safe store over a plain ``dict`` or a
:class:`cachetools.LRUCache`. It is the underlying cache the decorators in
:mod:`cache_decorators.cache.decorators` wrap. The wrapper isolates the
cachetools dependency so the eviction policy can evolve without changing
callers.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, MutableMapping
from typing import Any, Optional

from cachetools import LRUCache  # type: ignore[import-untyped]

from .errors import CacheError


class MemoryStore:
    """Simple in-memory cache store.

    Parameters
    ----------
    cache_id: str
        Identifier of the store, surfaced as :attr:`id`.
    maxsize: Optional[int]
        Store capacity. ``None`` keeps every entry; otherwise the
        least-recently-used entry is discarded when the store is full.
    """

    def __init__(self, cache_id: str, maxsize: Optional[int] = None) -> None:
        if not cache_id:
            raise CacheError("Cache instances require an id.")
        self._id = cache_id
        self._maxsize = maxsize
        self._data: MutableMapping[Hashable, Any]
        if maxsize is None:
            self._data = {}
        else:
            self._data = LRUCache(maxsize=maxsize)
        # cachetools containers are not thread-safe
        self._lock = threading.RLock()

    @property
    def id(self) -> str:
        return self._id

    @property
    def maxsize(self) -> Optional[int]:
        """Store capacity, or None when unbounded."""
        return self._maxsize

    def size(self) -> int:
        with self._lock:
            return len(self._data)

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            return self._data.get(key)

    def remove(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            return self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, MemoryStore):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"MemoryStore(id={self._id!r}, maxsize={self._maxsize!r})"
