"""Cache layer for the product collection.

Core components:
- **base**: ``CacheStore`` contract and explicit ``CacheResult`` outcomes
- **redis_store**: Redis backend with bounded operations and error classes
- **memory_store**: In-process and disabled stores
- **coordinator**: Cache-aside read path and write invalidation
- **factory**: Store selection from configuration
"""

from catalog.infrastructure.cache.base import CacheResult, CacheStatus, CacheStore
from catalog.infrastructure.cache.coordinator import (
    CacheAsideCoordinator,
    RecordSource,
)
from catalog.infrastructure.cache.factory import create_cache_store
from catalog.infrastructure.cache.memory_store import InMemoryCacheStore, NullCacheStore
from catalog.infrastructure.cache.redis_store import RedisCacheStore

__all__ = [
    "CacheAsideCoordinator",
    "CacheResult",
    "CacheStatus",
    "CacheStore",
    "InMemoryCacheStore",
    "NullCacheStore",
    "RecordSource",
    "RedisCacheStore",
    "create_cache_store",
]
