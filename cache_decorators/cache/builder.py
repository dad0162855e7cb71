"""Build decorated caches from configuration.

The decoration order is fixed: the store is wrapped by the weak layer first
and the blocking layer last, so single-flight locking sits in front of every
other behavior.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..config.models import AppConfig, CacheConfig, EnvSettings
from .base import Cache
from .decorators import BlockingCache, WeakCache
from .errors import CacheError
from .stores import MemoryStore

logger = logging.getLogger(__name__)


def build_cache(
    config: CacheConfig,
    store: Optional[Cache] = None,
    settings: Optional[EnvSettings] = None,
) -> Cache:
    """Create a cache and apply the decorators enabled in `config`.

    Parameters
    ----------
    config: CacheConfig
        Settings for the cache.
    store: Optional[Cache]
        Underlying cache to decorate. A :class:`MemoryStore` sized by
        `config.store_maxsize` is created when omitted.
    settings: Optional[EnvSettings]
        Source of defaults for values `config` leaves unset. Read from the
        environment when omitted.

    Returns
    -------
    Cache
        The outermost layer.
    """
    settings = settings or EnvSettings()
    cache: Cache = (
        store
        if store is not None
        else MemoryStore(config.id, maxsize=config.store_maxsize)
    )
    if cache.id != config.id:
        raise CacheError(
            f"Store id {cache.id!r} does not match configured id {config.id!r}"
        )
    chain: List[str] = [type(cache).__name__]

    if config.weak:
        capacity = (
            config.recency_capacity
            if "recency_capacity" in config.model_fields_set
            else settings.default_recency_capacity
        )
        cache = WeakCache(cache, recency_capacity=capacity)
        chain.append(type(cache).__name__)

    if config.blocking:
        timeout_ms = (
            config.blocking_timeout_ms
            if "blocking_timeout_ms" in config.model_fields_set
            else settings.default_blocking_timeout_ms
        )
        cache = BlockingCache(cache, timeout_ms=timeout_ms)
        chain.append(type(cache).__name__)

    logger.info(
        "cache_builder.built",
        extra={"cache_id": config.id, "chain": " -> ".join(reversed(chain))},
    )
    return cache


def build_caches(
    app_config: AppConfig, settings: Optional[EnvSettings] = None
) -> Dict[str, Cache]:
    """Build every cache declared in `app_config`, keyed by cache id."""
    settings = settings or EnvSettings()
    caches: Dict[str, Cache] = {}
    for cache_id, cfg in app_config.caches.items():
        if cache_id != cfg.id:
            raise CacheError(
                f"Cache entry {cache_id!r} declares a different id {cfg.id!r}"
            )
        caches[cache_id] = build_cache(cfg, settings=settings)
    return caches
