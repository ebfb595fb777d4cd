"""Cache store construction from configuration."""

from loguru import logger

from catalog.core.config import CacheConfig
from catalog.infrastructure.cache.base import CacheStore
from catalog.infrastructure.cache.memory_store import InMemoryCacheStore, NullCacheStore
from catalog.infrastructure.cache.redis_store import RedisCacheStore


def create_cache_store(config: CacheConfig) -> CacheStore:
    """Create the cache store selected by ``config.backend``.

    Args:
        config: Cache configuration.

    Returns:
        CacheStore: A Redis, in-memory or null store.
    """
    if config.backend == "redis":
        return RedisCacheStore.from_config(config)

    if config.backend == "memory":
        logger.info("Using in-process cache store")
        return InMemoryCacheStore()

    logger.info("Caching disabled, all reads go to the database")
    return NullCacheStore()
