"""Shared fixtures and test doubles for cache layer tests."""

from collections.abc import Callable, Sequence
from datetime import timedelta

import pytest

from catalog.domain.products import ProductRecord
from catalog.infrastructure.cache.base import CacheResult
from catalog.infrastructure.cache.memory_store import InMemoryCacheStore


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingCacheStore(InMemoryCacheStore):
    """In-memory store that records the operations it receives."""

    def __init__(self, clock: FakeClock) -> None:
        super().__init__(clock)
        self.calls: list[str] = []

    async def get(self, key: str) -> CacheResult:
        self.calls.append("get")
        return await super().get(key)

    async def set(self, key: str, value: bytes, ttl: timedelta) -> CacheResult:
        self.calls.append("set")
        return await super().set(key, value, ttl)

    async def set_expiry(self, key: str, ttl: timedelta) -> CacheResult:
        self.calls.append("set_expiry")
        return await super().set_expiry(key, ttl)

    async def delete(self, key: str) -> CacheResult:
        self.calls.append("delete")
        return await super().delete(key)


class FailingCacheStore(RecordingCacheStore):
    """Store whose selected operations fail as if the backend were down."""

    def __init__(self, clock: FakeClock, failing: Sequence[str]) -> None:
        super().__init__(clock)
        self.failing = set(failing)

    def _failure(self) -> CacheResult:
        return CacheResult.failed(
            ConnectionRefusedError("Connection refused"), "connection"
        )

    async def get(self, key: str) -> CacheResult:
        result = await super().get(key)
        return self._failure() if "get" in self.failing else result

    async def set(self, key: str, value: bytes, ttl: timedelta) -> CacheResult:
        if "set" in self.failing:
            self.calls.append("set")
            return self._failure()
        return await super().set(key, value, ttl)

    async def set_expiry(self, key: str, ttl: timedelta) -> CacheResult:
        result = await super().set_expiry(key, ttl)
        return self._failure() if "set_expiry" in self.failing else result

    async def delete(self, key: str) -> CacheResult:
        if "delete" in self.failing:
            self.calls.append("delete")
            return self._failure()
        return await super().delete(key)

    async def ping(self) -> CacheResult:
        return self._failure() if "ping" in self.failing else CacheResult.ok()


class StubRecordSource:
    """Record source returning a mutable list of records."""

    def __init__(
        self,
        records: Sequence[ProductRecord] = (),
        error: Exception | None = None,
    ) -> None:
        self.records = list(records)
        self.error = error
        self.calls = 0

    async def list_all(self) -> list[ProductRecord]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)


class ExplodingRecordSource:
    """Record source that must never be consulted."""

    async def list_all(self) -> list[ProductRecord]:
        raise AssertionError("record source consulted on a cache hit")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> RecordingCacheStore:
    return RecordingCacheStore(clock)


@pytest.fixture
def failing_store(clock: FakeClock) -> Callable[..., FailingCacheStore]:
    """Build a store whose named operations fail."""

    def _make(*failing: str) -> FailingCacheStore:
        return FailingCacheStore(clock, failing)

    return _make


@pytest.fixture
def record_source() -> Callable[..., StubRecordSource]:
    """Build a stub record source."""
    return StubRecordSource


@pytest.fixture
def exploding_source() -> ExplodingRecordSource:
    return ExplodingRecordSource()
