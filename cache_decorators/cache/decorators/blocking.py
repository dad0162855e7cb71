"""
Single-flight blocking cache decorator.

Sets a lock over a cache key when the element is not found in the cache.
Other threads asking for the same key wait until the lock owner fills the
element (``put``) or gives up (``abandon_population``/``remove``) instead of
all recomputing it.

Typical use::

    cache = BlockingCache(MemoryStore("users"), timeout_ms=500)
    user = cache.get_or_compute(user_id, load_user)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from typing import Any, Dict, Optional, Set

from ..base import Cache
from ..errors import CacheLockInterrupted, CacheLockTimeout, LockWaitInterrupted

logger = logging.getLogger(__name__)


class _KeyLock:
    """Per-key lock owned by one thread at a time.

    Re-acquisition by the owning thread succeeds immediately; a single
    :meth:`release` ends ownership. Waits may time out or be interrupted.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._owner: Optional[int] = None
        self._waiters: Set[int] = set()
        self._interrupted: Set[int] = set()

    def add_waiter(self, thread_id: int) -> None:
        """Register `thread_id` as waiting so :meth:`interrupt` can reach it."""
        with self._cond:
            self._waiters.add(thread_id)

    def acquire(self, timeout: Optional[float]) -> bool:
        """Acquire the lock, waiting at most `timeout` seconds (None = forever).

        Returns False when the timeout expires. Raises
        :class:`LockWaitInterrupted` when :meth:`interrupt` targets the waiter,
        including an interrupt that arrived after :meth:`add_waiter` but
        before the wait began.
        """
        me = threading.get_ident()
        with self._cond:
            try:
                if self._owner == me:
                    return True
                deadline = None if timeout is None else time.monotonic() + timeout
                while True:
                    if me in self._interrupted:
                        raise LockWaitInterrupted()
                    if self._owner is None:
                        break
                    if deadline is None:
                        self._cond.wait()
                        continue
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return False
                    self._cond.wait(remaining)
                self._owner = me
                return True
            finally:
                self._waiters.discard(me)
                self._interrupted.discard(me)

    def release(self) -> bool:
        """Release the lock if the calling thread owns it."""
        with self._cond:
            if self._owner != threading.get_ident():
                return False
            self._owner = None
            self._cond.notify_all()
            return True

    def held_by_current_thread(self) -> bool:
        return self._owner == threading.get_ident()

    def interrupt(self, thread_id: int) -> bool:
        """Wake `thread_id` out of its wait; False if it is not waiting here."""
        with self._cond:
            if thread_id not in self._waiters:
                return False
            self._interrupted.add(thread_id)
            self._cond.notify_all()
            return True


class BlockingCache:
    """
    Cache decorator that serializes population per key.

    A ``get`` that misses returns ``None`` while keeping the key's lock. The
    caller then owns the miss and must end it with :meth:`put` (store the
    value) or :meth:`abandon_population` (store nothing); both release the
    lock for the threads queued behind it. Hits release the lock before
    returning.

    Locks are created lazily and kept for the lifetime of the decorator.
    """

    def __init__(self, delegate: Cache, timeout_ms: int = 0) -> None:
        """
        Initialize the decorator.

        Parameters
        ----------
        delegate : Cache
            Underlying cache to decorate
        timeout_ms : int
            Maximum time to wait for a key lock in milliseconds.
            ``0`` waits indefinitely.
        """
        self._delegate = delegate
        self._locks: Dict[Hashable, _KeyLock] = {}
        self._waiting: Dict[int, _KeyLock] = {}
        self._table_lock = threading.Lock()
        self._timeout_ms = 0
        self.timeout_ms = timeout_ms

    @property
    def id(self) -> str:
        return self._delegate.id

    @property
    def delegate(self) -> Cache:
        return self._delegate

    @property
    def timeout_ms(self) -> int:
        """Lock wait timeout in milliseconds (0 = wait indefinitely)."""
        return self._timeout_ms

    @timeout_ms.setter
    def timeout_ms(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"timeout_ms must be >= 0, got {value}")
        self._timeout_ms = value

    def size(self) -> int:
        return self._delegate.size()

    def put(self, key: Hashable, value: Any) -> None:
        """Store `value` and release the key's lock, even if the store fails."""
        try:
            self._delegate.put(key, value)
        finally:
            self._release_lock(key)

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Return the cached value for `key`.

        On a miss the calling thread keeps the key's lock and must follow up
        with :meth:`put` or :meth:`abandon_population`.

        Raises
        ------
        CacheLockTimeout
            If the lock wait exceeds :attr:`timeout_ms`
        CacheLockInterrupted
            If :meth:`interrupt` woke the waiting thread
        """
        self._acquire_lock(key)
        try:
            value = self._delegate.get(key)
        except Exception:
            self._release_lock(key)
            raise
        if value is not None:
            self._release_lock(key)
        else:
            logger.debug(
                "blocking_cache.miss_lock_held",
                extra={"cache_id": self.id, "key": repr(key)},
            )
        return value

    def remove(self, key: Hashable) -> Optional[Any]:
        """Delete `key` from the store and end any population this thread owns."""
        try:
            return self._delegate.remove(key)
        finally:
            self._release_lock(key)

    def abandon_population(self, key: Hashable) -> None:
        """Release the key's lock without storing anything."""
        self._release_lock(key)

    def clear(self) -> None:
        self._delegate.clear()

    def get_or_compute(
        self, key: Hashable, loader: Callable[[Hashable], Optional[Any]]
    ) -> Optional[Any]:
        """
        Return the cached value, computing it at most once across threads.

        On a miss, `loader(key)` runs while the key's lock is held. A
        non-None result is stored; the lock is released on every exit path,
        including a failing loader.
        """
        value = self.get(key)
        if value is not None:
            return value
        try:
            value = loader(key)
            if value is not None:
                self.put(key, value)
            return value
        finally:
            self.abandon_population(key)

    @contextmanager
    def populating(self, key: Hashable) -> Iterator[Optional[Any]]:
        """
        Scope the ownership of a miss.

        Yields the cached value or None. On a miss the block is expected to
        call :meth:`put`; otherwise the lock is abandoned when the block exits.
        """
        value = self.get(key)
        try:
            yield value
        finally:
            self.abandon_population(key)

    def holds_lock(self, key: Hashable) -> bool:
        """Return True if the calling thread currently owns the key's lock."""
        lock = self._locks.get(key)
        return lock is not None and lock.held_by_current_thread()

    def interrupt(self, thread: threading.Thread) -> bool:
        """
        Interrupt `thread` while it waits for a key lock on this cache.

        The interrupted ``get`` raises :class:`CacheLockInterrupted`.
        Returns False if the thread is not waiting on this cache.
        """
        if thread.ident is None:
            return False
        with self._table_lock:
            lock = self._waiting.get(thread.ident)
            if lock is None:
                return False
            return lock.interrupt(thread.ident)

    def _get_lock_for_key(self, key: Hashable) -> _KeyLock:
        with self._table_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = _KeyLock()
                self._locks[key] = lock
            return lock

    def _acquire_lock(self, key: Hashable) -> None:
        lock = self._get_lock_for_key(key)
        timeout = self._timeout_ms / 1000.0 if self._timeout_ms > 0 else None
        me = threading.get_ident()
        with self._table_lock:
            self._waiting[me] = lock
            lock.add_waiter(me)
        try:
            acquired = lock.acquire(timeout)
        except LockWaitInterrupted as exc:
            logger.warning(
                "blocking_cache.lock_interrupted",
                extra={"cache_id": self.id, "key": repr(key)},
            )
            raise CacheLockInterrupted(key, self.id) from exc
        finally:
            with self._table_lock:
                self._waiting.pop(me, None)
        if not acquired:
            logger.warning(
                "blocking_cache.lock_timeout",
                extra={
                    "cache_id": self.id,
                    "key": repr(key),
                    "timeout_ms": self._timeout_ms,
                },
            )
            raise CacheLockTimeout(key, self.id, self._timeout_ms)

    def _release_lock(self, key: Hashable) -> None:
        lock = self._locks.get(key)
        if lock is not None:
            lock.release()
