"""Cache decorators: each wraps a :class:`~cache_decorators.cache.base.Cache`."""

from .blocking import BlockingCache
from .weak import DEFAULT_RECENCY_CAPACITY, WeakCache, WeakEntry

__all__ = ["BlockingCache", "WeakCache", "WeakEntry", "DEFAULT_RECENCY_CAPACITY"]
