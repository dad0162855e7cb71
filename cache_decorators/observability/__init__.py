"""Observability utilities: logging setup.

This module configures standard logging and, if available, integrates
`structlog` for structured logs. The dependency on `structlog` is optional to
keep the base runtime lightweight.
"""

from __future__ import annotations

import importlib
import logging
from typing import Optional

CACHE_LOGGERS = [
    "cache_decorators.cache.builder",
    "cache_decorators.cache.decorators.blocking",
    "cache_decorators.cache.decorators.weak",
]


def setup_logging(level: str = "INFO", cache_level: Optional[str] = None) -> None:
    """Configure application logging.

    Parameters
    ----------
    level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    cache_level: Optional[str]
        Optional separate level for the cache loggers, e.g. "DEBUG" to see
        lock ownership and purge events without debugging everything else.

    Behavior
    --------
    - Initializes Python's logging with the requested level.
    - If `structlog` is installed, configures it with a filtering bound logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=("%(asctime)s %(levelname)s %(name)s - %(message)s"),
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    if cache_level is not None:
        cache_numeric = getattr(logging, cache_level.upper(), numeric_level)
        for logger_name in CACHE_LOGGERS:
            logging.getLogger(logger_name).setLevel(cache_numeric)

    try:  # optional structlog
        structlog = importlib.import_module("structlog")
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        )
    except ModuleNotFoundError:  # pragma: no cover
        pass
