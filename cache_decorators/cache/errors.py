"""Error types raised by caches and cache decorators."""

from __future__ import annotations

from collections.abc import Hashable


class CacheError(Exception):
    """Base class for all cache errors."""


class CacheLockTimeout(CacheError):
    """Bounded wait for a per-key lock exceeded the configured timeout.

    Attributes
    ----------
    key: Hashable
        Key whose lock could not be acquired.
    cache_id: str
        Identifier of the decorated store.
    timeout_ms: int
        Configured timeout in milliseconds.
    """

    def __init__(self, key: Hashable, cache_id: str, timeout_ms: int) -> None:
        self.key = key
        self.cache_id = cache_id
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Couldn't get a lock in {timeout_ms}ms for the key {key!r} "
            f"at the cache {cache_id}"
        )


class CacheLockInterrupted(CacheError):
    """Waiting thread was interrupted before it acquired a per-key lock."""

    def __init__(self, key: Hashable, cache_id: str) -> None:
        self.key = key
        self.cache_id = cache_id
        super().__init__(
            f"Got interrupted while trying to acquire lock for key {key!r} "
            f"at the cache {cache_id}"
        )


class LockWaitInterrupted(Exception):
    """Raised inside a lock wait when another thread interrupts the waiter."""
