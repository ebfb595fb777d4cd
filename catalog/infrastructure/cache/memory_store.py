"""Process-local cache stores.

``InMemoryCacheStore`` keeps entries in a dict with monotonic-clock expiry.
It serves local development and tests; entries are not shared between
processes. ``NullCacheStore`` is used when caching is disabled and turns
every read into a miss.
"""

import time
from collections.abc import Callable
from datetime import timedelta

from catalog.infrastructure.cache.base import CacheResult


class InMemoryCacheStore:
    """Dict-backed cache store with per-key expiry.

    Args:
        clock: Monotonic time source in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[bytes, float]] = {}

    def _live_entry(self, key: str) -> tuple[bytes, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> CacheResult:
        entry = self._live_entry(key)
        if entry is None:
            return CacheResult.miss()
        return CacheResult.hit(entry[0])

    async def set(self, key: str, value: bytes, ttl: timedelta) -> CacheResult:
        self._entries[key] = (value, self._clock() + ttl.total_seconds())
        return CacheResult.ok()

    async def set_expiry(self, key: str, ttl: timedelta) -> CacheResult:
        entry = self._live_entry(key)
        if entry is None:
            return CacheResult.miss()
        self._entries[key] = (entry[0], self._clock() + ttl.total_seconds())
        return CacheResult.ok()

    async def delete(self, key: str) -> CacheResult:
        self._entries.pop(key, None)
        return CacheResult.ok()

    async def ping(self) -> CacheResult:
        return CacheResult.ok()

    async def close(self) -> None:
        self._entries.clear()


class NullCacheStore:
    """Cache store that stores nothing."""

    async def get(self, key: str) -> CacheResult:
        _ = key
        return CacheResult.miss()

    async def set(self, key: str, value: bytes, ttl: timedelta) -> CacheResult:
        _ = (key, value, ttl)
        return CacheResult.ok()

    async def set_expiry(self, key: str, ttl: timedelta) -> CacheResult:
        _ = (key, ttl)
        return CacheResult.miss()

    async def delete(self, key: str) -> CacheResult:
        _ = key
        return CacheResult.ok()

    async def ping(self) -> CacheResult:
        return CacheResult.ok()

    async def close(self) -> None:
        return None
