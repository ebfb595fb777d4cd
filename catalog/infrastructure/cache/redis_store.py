"""Redis-backed cache store.

The client keeps a connection pool shared by all concurrent requests. Each
operation is bounded twice: by the socket timeouts configured on the client
and by an ``asyncio.timeout`` around the command, so a hung backend costs at
most ``operation_timeout_seconds`` per call before the request falls back to
the database.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
)
from redis.exceptions import (
    DataError,
    InvalidResponse,
    RedisError,
    ResponseError,
)
from redis.exceptions import (
    TimeoutError as RedisTimeoutError,
)

from catalog.core.config import CacheConfig
from catalog.core.error_context import mask_url_password
from catalog.infrastructure.cache.base import CacheResult

HEALTH_CHECK_INTERVAL_SECONDS = 30

# Failures that mean "no cache this round", never a request failure
CACHE_BACKEND_ERRORS: tuple[type[BaseException], ...] = (
    RedisError,
    OSError,
    TimeoutError,
)


def classify_cache_error(error: BaseException) -> str:
    """Map a backend exception to a short failure class for logs.

    Args:
        error: Exception raised by the Redis client or the timeout guard.

    Returns:
        str: One of ``timeout``, ``connection``, ``protocol`` or ``backend``.
    """
    if isinstance(error, (RedisTimeoutError, TimeoutError)):
        return "timeout"
    if isinstance(error, (RedisConnectionError, OSError)):
        return "connection"
    if isinstance(error, (ResponseError, DataError, InvalidResponse)):
        return "protocol"
    return "backend"


class RedisCacheStore:
    """Cache store on top of ``redis.asyncio``.

    Args:
        client: An asyncio Redis client. Payloads are raw bytes, so the client
            must not decode responses.
        operation_timeout: Upper bound in seconds for a single command.
    """

    def __init__(self, client: redis.Redis, operation_timeout: float) -> None:
        self._client = client
        self._operation_timeout = operation_timeout

    @classmethod
    def from_config(cls, config: CacheConfig) -> RedisCacheStore:
        """Build a store from cache configuration.

        No connection is opened here; the pool connects lazily on first use.

        Args:
            config: Cache configuration.

        Returns:
            RedisCacheStore: A store using a pooled client.
        """
        client = redis.from_url(
            config.redis_url,
            socket_timeout=config.operation_timeout_seconds,
            socket_connect_timeout=config.connect_timeout_seconds,
            health_check_interval=HEALTH_CHECK_INTERVAL_SECONDS,
        )
        logger.info(
            "Created Redis cache client for {}",
            mask_url_password(config.redis_url),
            operation_timeout_seconds=config.operation_timeout_seconds,
        )
        return cls(client, config.operation_timeout_seconds)

    async def get(self, key: str) -> CacheResult:
        try:
            async with asyncio.timeout(self._operation_timeout):
                value = await self._client.get(key)
        except CACHE_BACKEND_ERRORS as e:
            return CacheResult.failed(e, classify_cache_error(e))

        if value is None:
            return CacheResult.miss()
        return CacheResult.hit(value)

    async def set(self, key: str, value: bytes, ttl: timedelta) -> CacheResult:
        try:
            async with asyncio.timeout(self._operation_timeout):
                await self._client.set(key, value, ex=ttl)
        except CACHE_BACKEND_ERRORS as e:
            return CacheResult.failed(e, classify_cache_error(e))
        return CacheResult.ok()

    async def set_expiry(self, key: str, ttl: timedelta) -> CacheResult:
        try:
            async with asyncio.timeout(self._operation_timeout):
                updated = await self._client.expire(key, ttl)
        except CACHE_BACKEND_ERRORS as e:
            return CacheResult.failed(e, classify_cache_error(e))

        # EXPIRE answers 0 when the key does not exist
        return CacheResult.ok() if updated else CacheResult.miss()

    async def delete(self, key: str) -> CacheResult:
        try:
            async with asyncio.timeout(self._operation_timeout):
                await self._client.delete(key)
        except CACHE_BACKEND_ERRORS as e:
            return CacheResult.failed(e, classify_cache_error(e))
        return CacheResult.ok()

    async def ping(self) -> CacheResult:
        try:
            async with asyncio.timeout(self._operation_timeout):
                await self._client.ping()
        except CACHE_BACKEND_ERRORS as e:
            return CacheResult.failed(e, classify_cache_error(e))
        return CacheResult.ok()

    async def close(self) -> None:
        """Close the client and its connection pool."""
        await self._client.aclose()
        logger.info("Redis cache client closed")
