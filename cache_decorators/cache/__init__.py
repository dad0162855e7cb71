"""Cache contract, stores, decorators and wiring."""

from __future__ import annotations

from .base import Cache
from .builder import build_cache, build_caches
from .decorators import BlockingCache, WeakCache
from .errors import CacheError, CacheLockInterrupted, CacheLockTimeout
from .stores import MemoryStore

__all__ = [
    "Cache",
    "MemoryStore",
    "BlockingCache",
    "WeakCache",
    "CacheError",
    "CacheLockTimeout",
    "CacheLockInterrupted",
    "build_cache",
    "build_caches",
]
