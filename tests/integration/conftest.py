"""Shared fixtures for integration tests.

The application is exercised end to end through ``httpx.ASGITransport``:
routes, middleware, exception handlers, the catalog service and the
cache-aside coordinator all run for real. The record store is replaced by an
in-memory repository and the cache by ``InMemoryCacheStore`` (or a store
whose backend is down).
"""

from collections.abc import AsyncGenerator, Callable
from datetime import date
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from catalog.api.dependencies import get_catalog_service
from catalog.api.main import create_app
from catalog.core.config import CacheConfig, Settings, get_settings
from catalog.core.context import RequestContext
from catalog.core.exceptions import NotFoundError, RecordSourceError, ValidationError
from catalog.domain.products import ProductData, ProductRecord
from catalog.infrastructure.cache import (
    CacheAsideCoordinator,
    CacheResult,
    CacheStore,
    InMemoryCacheStore,
)
from catalog.services.catalog import CatalogService

TODAY = date(2024, 6, 1)


class InMemoryProductRepository:
    """Record source keeping products in a dict, with the real validation."""

    def __init__(self) -> None:
        self.rows: dict[int, ProductRecord] = {}
        self.next_id = 1
        self.list_calls = 0
        self.unavailable = False

    def _check_available(self, operation: str) -> None:
        if self.unavailable:
            raise RecordSourceError(
                f"Record store unavailable during {operation}",
                context={"operation": operation},
                cause=ConnectionRefusedError("Connection refused"),
            )

    def _validate(self, data: ProductData) -> None:
        if blank := data.blank_required_fields():
            raise ValidationError(
                "name, category and price are required fields",
                context={"blank_fields": blank},
            )

    async def list_all(self) -> list[ProductRecord]:
        self._check_available("get_all")
        self.list_calls += 1
        return [self.rows[key] for key in sorted(self.rows)]

    async def create(self, data: ProductData) -> ProductRecord:
        self._validate(data)
        self._check_available("add")
        record = ProductRecord(
            id=self.next_id,
            created_date=data.created_date or TODAY,
            **data.model_dump(exclude={"created_date"}),
        )
        self.rows[record.id] = record
        self.next_id += 1
        return record

    async def update(self, product_id: int, data: ProductData) -> ProductRecord:
        if product_id <= 0:
            raise ValidationError("Product ID must be greater than zero")
        self._validate(data)
        self._check_available("update")
        current = self.rows.get(product_id)
        if current is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        record = current.model_copy(update=data.model_dump(exclude_none=True))
        self.rows[product_id] = record
        return record

    async def delete(self, product_id: int) -> bool:
        if product_id <= 0:
            raise ValidationError("Product ID must be greater than zero")
        self._check_available("delete")
        return self.rows.pop(product_id, None) is not None

    async def commit(self) -> None:
        self._check_available("commit")


class UnreachableCacheStore:
    """Cache store whose backend refuses every connection."""

    def __init__(self) -> None:
        self.calls = 0

    def _down(self) -> CacheResult:
        self.calls += 1
        return CacheResult.failed(
            ConnectionRefusedError("Connection refused"), "connection"
        )

    async def get(self, key: str) -> CacheResult:
        return self._down()

    async def set(self, key: str, value: bytes, ttl: Any) -> CacheResult:
        return self._down()

    async def set_expiry(self, key: str, ttl: Any) -> CacheResult:
        return self._down()

    async def delete(self, key: str) -> CacheResult:
        return self._down()

    async def ping(self) -> CacheResult:
        return self._down()

    async def close(self) -> None:
        return None


@pytest.fixture(autouse=True)
def clean_state() -> None:
    get_settings.cache_clear()
    RequestContext.clear()


@pytest.fixture
def product_repository() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="development",
        cache_config=CacheConfig(backend="memory", ttl_minutes=20),
    )


@pytest.fixture
def app_factory(
    test_settings: Settings, product_repository: InMemoryProductRepository
) -> Callable[[CacheStore], FastAPI]:
    """Build an application wired to the in-memory repository."""

    def _create(cache_store: CacheStore) -> FastAPI:
        app = create_app(settings=test_settings, cache_store=cache_store)
        coordinator = CacheAsideCoordinator(
            cache_store,
            product_repository,
            key=test_settings.cache_config.collection_key,
            ttl=test_settings.cache_config.ttl,
        )
        service = CatalogService(product_repository, coordinator)  # type: ignore[arg-type]
        app.dependency_overrides[get_catalog_service] = lambda: service
        return app

    return _create


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
async def client(
    app_factory: Callable[[CacheStore], FastAPI], cache_store: InMemoryCacheStore
) -> AsyncGenerator[AsyncClient]:
    """Client for an application with a working cache."""
    transport = ASGITransport(app=app_factory(cache_store))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def unreachable_cache() -> UnreachableCacheStore:
    return UnreachableCacheStore()


@pytest.fixture
async def degraded_client(
    app_factory: Callable[[CacheStore], FastAPI],
    unreachable_cache: UnreachableCacheStore,
) -> AsyncGenerator[AsyncClient]:
    """Client for an application whose cache backend is down."""
    transport = ASGITransport(app=app_factory(unreachable_cache))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
