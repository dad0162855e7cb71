"""Tests for the in-memory cache store."""

from __future__ import annotations

import pytest

from cache_decorators.cache import Cache, CacheError, MemoryStore


def test_put_get_remove(store):
    """Test basic put/get/remove behavior."""
    store.put("a", 1)
    store.put("b", 2)

    assert store.get("a") == 1
    assert store.size() == 2
    assert store.remove("a") == 1
    assert store.get("a") is None
    assert store.remove("missing") is None
    assert store.size() == 1


def test_clear(store):
    """Test clear drops every entry."""
    for i in range(5):
        store.put(i, i)

    store.clear()

    assert store.size() == 0
    assert store.get(0) is None


def test_bounded_store_evicts_least_recently_used():
    """Test maxsize enables LRU eviction in the store."""
    store = MemoryStore("lru", maxsize=2)
    store.put("a", 1)
    store.put("b", 2)
    store.get("a")
    store.put("c", 3)

    assert store.size() == 2
    assert store.get("b") is None
    assert store.get("a") == 1
    assert store.get("c") == 3
    assert store.maxsize == 2


def test_store_requires_id():
    """Test an empty id is rejected."""
    with pytest.raises(CacheError, match="require an id"):
        MemoryStore("")


def test_equality_by_id():
    """Test stores compare and hash by id."""
    assert MemoryStore("x") == MemoryStore("x")
    assert MemoryStore("x") != MemoryStore("y")
    assert len({MemoryStore("x"), MemoryStore("x")}) == 1


def test_store_satisfies_cache_protocol(store):
    """Test the store is recognized as a Cache."""
    assert isinstance(store, Cache)
    assert store.id == "test-cache"
