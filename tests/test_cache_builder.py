"""Tests for building decorated caches from configuration."""

from __future__ import annotations

import logging

import pytest

from cache_decorators.cache import (
    BlockingCache,
    CacheError,
    MemoryStore,
    WeakCache,
    build_cache,
    build_caches,
)
from cache_decorators.config.models import AppConfig, CacheConfig, EnvSettings


def test_plain_store():
    """Test no decorators yields the bare store."""
    cache = build_cache(CacheConfig(id="plain", store_maxsize=10))

    assert isinstance(cache, MemoryStore)
    assert cache.maxsize == 10


def test_blocking_wraps_weak():
    """Test blocking is the outermost layer."""
    cache = build_cache(
        CacheConfig(
            id="both",
            blocking=True,
            blocking_timeout_ms=100,
            weak=True,
            recency_capacity=8,
        )
    )

    assert isinstance(cache, BlockingCache)
    assert cache.timeout_ms == 100
    assert isinstance(cache.delegate, WeakCache)
    assert cache.delegate.recency_capacity == 8
    assert isinstance(cache.delegate.delegate, MemoryStore)
    assert cache.id == "both"


def test_unset_values_fall_back_to_settings():
    """Test settings supply values the config leaves unset."""
    settings = EnvSettings(
        default_blocking_timeout_ms=300, default_recency_capacity=12
    )
    cache = build_cache(
        CacheConfig(id="defaults", blocking=True, weak=True), settings=settings
    )

    assert cache.timeout_ms == 300
    assert cache.delegate.recency_capacity == 12


def test_explicit_values_win_over_settings():
    """Test explicitly configured values are kept, including zero."""
    settings = EnvSettings(
        default_blocking_timeout_ms=300, default_recency_capacity=12
    )
    cache = build_cache(
        CacheConfig(
            id="explicit",
            blocking=True,
            blocking_timeout_ms=0,
            weak=True,
            recency_capacity=0,
        ),
        settings=settings,
    )

    assert cache.timeout_ms == 0
    assert cache.delegate.recency_capacity == 0


def test_custom_store_is_decorated():
    """Test a provided store is used as the innermost layer."""
    store = MemoryStore("custom")
    cache = build_cache(CacheConfig(id="custom", weak=True), store=store)

    assert cache.delegate is store


def test_custom_store_id_mismatch():
    """Test a store whose id differs from the config is rejected."""
    with pytest.raises(CacheError, match="does not match"):
        build_cache(CacheConfig(id="a"), store=MemoryStore("b"))


def test_build_caches():
    """Test every declared cache is built and keyed by id."""
    app_config = AppConfig(
        caches={
            "users": CacheConfig(id="users", blocking=True),
            "blobs": CacheConfig(id="blobs", weak=True),
        }
    )

    caches = build_caches(app_config)

    assert isinstance(caches["users"], BlockingCache)
    assert isinstance(caches["blobs"], WeakCache)


def test_build_caches_rejects_mismatched_keys():
    """Test a mapping key must equal the cache id."""
    app_config = AppConfig(caches={"users": CacheConfig(id="people")})

    with pytest.raises(CacheError, match="different id"):
        build_caches(app_config)


def test_builder_logs_chain(caplog):
    """Test the decoration chain is logged at INFO."""
    with caplog.at_level(logging.INFO):
        build_cache(CacheConfig(id="logged", blocking=True, weak=True))

    records = [r for r in caplog.records if r.message == "cache_builder.built"]
    assert len(records) == 1
    assert records[0].cache_id == "logged"
    assert records[0].chain == "BlockingCache -> WeakCache -> MemoryStore"
