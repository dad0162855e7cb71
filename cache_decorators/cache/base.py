"""Cache contract shared by stores and decorators."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Cache(Protocol):
    """Protocol for key-value caches.

    Stores implement it directly; decorators implement it by delegating to a
    wrapped cache, so layers can be stacked in any order. ``None`` is the
    absent marker returned by :meth:`get`.
    """

    @property
    def id(self) -> str:
        """Stable identifier of the cache."""
        raise NotImplementedError

    def size(self) -> int:
        """Return the number of live entries."""
        raise NotImplementedError

    def put(self, key: Hashable, value: Any) -> None:
        """Insert or update `key` with `value`."""
        raise NotImplementedError

    def get(self, key: Hashable) -> Optional[Any]:
        """Return value for `key` or None if missing."""
        raise NotImplementedError

    def remove(self, key: Hashable) -> Optional[Any]:
        """Delete `key`, returning the previous value if the layer knows it."""
        raise NotImplementedError

    def clear(self) -> None:
        """Drop every entry."""
        raise NotImplementedError
