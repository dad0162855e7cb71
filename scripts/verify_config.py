#!/usr/bin/env python3
"""
Cache Configuration Verification Script

Loads a cache configuration file, builds every declared cache, and runs a
put/get round against each one so misconfigured decorator chains show up
before an application starts using them.

Usage:
    python scripts/verify_config.py [config.json]

Environment:
    CACHE_DECORATORS_LOG_LEVEL and the other CACHE_DECORATORS_* settings are
    honored, as is a .env file in the working directory.
"""

import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

try:
    from cache_decorators.cache import BlockingCache, CacheError, build_caches
    from cache_decorators.config.models import AppConfig, EnvSettings
    from cache_decorators.observability import setup_logging
except ImportError as e:
    print(f"❌ Critical Import Error: {e}")
    print("   Ensure you are running from project root; dependencies installed.")
    sys.exit(1)

logger = logging.getLogger(__name__)


class _Probe:
    """Weakly referenceable probe value."""


def verify_cache(cache_id: str, cache) -> bool:
    """Run a miss, put, hit sequence against one cache."""
    logger.info("-" * 50)
    logger.info(f"🔌 Verifying cache: {cache_id} ({type(cache).__name__})")
    key = ("verify_config", cache_id)
    probe = _Probe()
    try:
        if cache.get(key) is not None:
            logger.warning(f"⚠️  Probe key already present in {cache_id}")
        cache.put(key, probe)
        if cache.get(key) is not probe:
            logger.error(f"❌ {cache_id}: value read back differs from value stored")
            return False
        cache.remove(key)
    except CacheError as exc:
        logger.error(f"❌ {cache_id}: {exc}")
        if isinstance(cache, BlockingCache):
            cache.abandon_population(key)
        return False
    logger.info(f"✅ {cache_id}: OK (size={cache.size()})")
    return True


def main() -> int:
    settings = EnvSettings()
    setup_logging(settings.log_level)

    config_path = Path(sys.argv[1] if len(sys.argv) > 1 else "config.json")
    if not config_path.exists():
        logger.error(f"❌ Config file not found: {config_path}")
        return 1

    app_config = AppConfig.load(config_path)
    if not app_config.caches:
        logger.warning("⚠️  No caches declared in configuration")
        return 0

    try:
        caches = build_caches(app_config, settings=settings)
    except CacheError as exc:
        logger.error(f"❌ {exc}")
        return 1

    results = [verify_cache(cache_id, cache) for cache_id, cache in caches.items()]
    logger.info("-" * 50)
    if all(results):
        logger.info(f"🎉 All {len(results)} caches verified")
        return 0
    logger.error(f"❌ {results.count(False)} of {len(results)} caches failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
