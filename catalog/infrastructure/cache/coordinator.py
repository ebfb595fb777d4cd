"""Cache-aside coordination for the product collection.

The whole product collection is cached as one JSON array under a single key.
Reads try the cache first and repopulate it from the record source on a miss;
writes delete the key after the change is committed.

The cache is never a correctness dependency. Any backend failure is logged
as a warning and the request is answered from the record source. Only
record-source errors reach the caller.

Concurrent readers may both miss and both repopulate; the last write wins and
both snapshots are equally valid. A read racing a write can put a stale
snapshot back after invalidation; it lives at most one TTL.
"""

from collections.abc import Sequence
from datetime import timedelta
from typing import Protocol

import orjson
from loguru import logger
from pydantic import TypeAdapter

from catalog.domain.products import ProductRecord
from catalog.infrastructure.cache.base import CacheResult, CacheStatus, CacheStore

_collection_adapter: TypeAdapter[list[ProductRecord]] = TypeAdapter(
    list[ProductRecord]
)


class RecordSource(Protocol):
    """Authoritative store for the tracked collection."""

    async def list_all(self) -> Sequence[ProductRecord]:
        """Return every record, or raise on connectivity/query failure."""
        ...


def serialize_collection(records: Sequence[ProductRecord]) -> bytes:
    """Encode records as the cached JSON array.

    Args:
        records: Records to encode.

    Returns:
        bytes: JSON array of record objects.
    """
    return orjson.dumps([record.model_dump(mode="json") for record in records])


def deserialize_collection(payload: bytes) -> list[ProductRecord]:
    """Decode a cached JSON array.

    Args:
        payload: Bytes previously produced by ``serialize_collection``.

    Returns:
        list[ProductRecord]: The decoded records.

    Raises:
        ValueError: If the payload is not valid JSON or not a record array.
    """
    return _collection_adapter.validate_python(orjson.loads(payload))


class CacheAsideCoordinator:
    """Read-through population and write-path invalidation for one key.

    The coordinator holds no mutable state and may be shared by concurrent
    requests.

    Args:
        store: Cache store holding the collection snapshot.
        source: Record source used on cache misses and failures.
        key: Cache key of the collection snapshot.
        ttl: Lifetime of the snapshot.
    """

    def __init__(
        self,
        store: CacheStore,
        source: RecordSource,
        *,
        key: str,
        ttl: timedelta,
    ) -> None:
        self._store = store
        self._source = source
        self._key = key
        self._ttl = ttl

    @property
    def key(self) -> str:
        return self._key

    async def fetch_collection(self) -> list[ProductRecord]:
        """Return the full collection, from the cache when possible.

        Returns:
            list[ProductRecord]: All records; empty when the store is empty.

        Raises:
            CatalogError: Whatever the record source raises. Cache failures
                are never raised.
        """
        cached = await self._read_snapshot()
        if cached is not None:
            return cached

        records = list(await self._source.list_all())

        if not records:
            logger.debug("Record source is empty, snapshot not cached")
            return []

        await self._write_snapshot(records)
        return records

    async def invalidate(self) -> bool:
        """Drop the cached snapshot after a write.

        A failure is logged and swallowed; the next read reloads from the
        record source once the entry expires or is replaced.

        Returns:
            bool: True when the backend confirmed the delete.
        """
        result = await self._store.delete(self._key)
        if result.is_error:
            self._report_degraded("delete", result)
            return False

        logger.info("Cache invalidated", cache_key=self._key)
        return True

    async def _read_snapshot(self) -> list[ProductRecord] | None:
        # Refresh the expiry before reading so a hot key is not served stale
        refreshed = await self._store.set_expiry(self._key, self._ttl)
        if refreshed.is_error:
            self._report_degraded("set_expiry", refreshed)
            return None

        result = await self._store.get(self._key)
        if result.is_error:
            self._report_degraded("get", result)
            return None

        if result.status is CacheStatus.MISS or not result.value:
            logger.debug("Cache miss", cache_key=self._key)
            return None

        try:
            records = deserialize_collection(result.value)
        except ValueError as e:
            logger.warning(
                "Discarding undecodable cache entry: {}",
                type(e).__name__,
                cache_operation="get",
                cache_key=self._key,
                reason="payload",
            )
            return None

        logger.info(
            "Serving {} products from cache", len(records), cache_key=self._key
        )
        return records

    async def _write_snapshot(self, records: list[ProductRecord]) -> None:
        result = await self._store.set(
            self._key, serialize_collection(records), self._ttl
        )
        if result.is_error:
            self._report_degraded("set", result)
            return

        logger.info(
            "Cached {} products",
            len(records),
            cache_key=self._key,
            ttl_seconds=int(self._ttl.total_seconds()),
        )

    def _report_degraded(self, operation: str, result: CacheResult) -> None:
        logger.warning(
            "Cache backend unavailable during {}, continuing without cache",
            operation,
            cache_operation=operation,
            cache_key=self._key,
            reason=result.reason,
            error_type=type(result.error).__name__ if result.error else None,
        )
