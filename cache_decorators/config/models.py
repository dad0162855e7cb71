"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration of caches. JSON parsing prefers `orjson` when available for
speed, and falls back to the Python standard library's `json` module so
`orjson` stays an optional install.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheConfig(BaseModel):
    """Configuration for a single decorated cache.

    Attributes
    ----------
    id: str
        Identifier of the underlying store.
    store_maxsize: Optional[int]
        Capacity of the underlying store; None keeps every entry.
    blocking: bool
        Wrap the cache in a single-flight :class:`BlockingCache`.
    blocking_timeout_ms: int
        Lock wait timeout in milliseconds; 0 waits indefinitely.
    weak: bool
        Store values behind weak references with :class:`WeakCache`.
    recency_capacity: int
        Number of recently read values the weak layer keeps alive.
    """

    id: str = Field(..., min_length=1, description="Cache identifier")
    store_maxsize: Optional[int] = Field(
        None, ge=1, description="Underlying store capacity (None = unbounded)"
    )
    blocking: bool = Field(False, description="Enable single-flight population")
    blocking_timeout_ms: int = Field(
        0, ge=0, description="Lock wait timeout in milliseconds (0 = forever)"
    )
    weak: bool = Field(False, description="Hold values by weak reference")
    recency_capacity: int = Field(
        256, ge=0, description="Recency buffer capacity of the weak layer"
    )


class AppConfig(BaseModel):
    """Top-level configuration.

    Attributes
    ----------
    caches: Dict[str, CacheConfig]
        Mapping from cache id to its settings.
    """

    caches: Dict[str, CacheConfig] = Field(default_factory=dict)

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load configuration from a JSON file."""
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return AppConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    default_blocking_timeout_ms: int
        Lock wait timeout used by caches whose config does not set
        `blocking_timeout_ms`.
    default_recency_capacity: int
        Recency buffer capacity used by caches whose config does not set
        `recency_capacity`.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CACHE_DECORATORS_", extra="ignore"
    )

    log_level: str = Field("INFO")
    default_blocking_timeout_ms: int = Field(
        0,
        ge=0,
        description="Fallback lock wait timeout in milliseconds",
    )
    default_recency_capacity: int = Field(
        256,
        ge=0,
        description="Fallback recency buffer capacity",
    )
