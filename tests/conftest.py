"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import cache_decorators`` resolve correctly regardless of the working
directory pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture
def store():
    """Unbounded in-memory store."""
    from cache_decorators.cache.stores import MemoryStore

    return MemoryStore("test-cache")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep CACHE_DECORATORS_* variables and .env files out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("CACHE_DECORATORS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
