"""Tests for logging setup."""

from __future__ import annotations

import logging

from cache_decorators.observability import CACHE_LOGGERS, setup_logging


def test_setup_logging_sets_cache_logger_levels():
    """Test cache loggers can be tuned separately from the root level."""
    try:
        setup_logging("WARNING", cache_level="DEBUG")

        for name in CACHE_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG
    finally:
        for name in CACHE_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)


def test_setup_logging_without_cache_level_leaves_loggers_alone():
    """Test cache loggers keep inheriting when no cache level is given."""
    setup_logging("INFO")

    for name in CACHE_LOGGERS:
        assert logging.getLogger(name).level == logging.NOTSET
