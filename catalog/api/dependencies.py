"""Per-request wiring of the catalog service.

The cache store is created once in the application lifespan and kept on
``app.state`` together with the settings the application was built with;
repository, coordinator and service are cheap and built per request around
the request's database session.
"""

from typing import Annotated

from fastapi import Depends, Request

from catalog.core.config import Settings
from catalog.infrastructure.cache import (
    CacheAsideCoordinator,
    CacheStore,
    NullCacheStore,
)
from catalog.infrastructure.database.dependencies import DatabaseSession
from catalog.infrastructure.database.repository import ProductRepository
from catalog.services.catalog import CatalogService


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    return request.app.state.settings


def get_cache_store(request: Request) -> CacheStore | None:
    """Return the application's cache store, or None before startup built it."""
    return request.app.state.cache_store


def get_catalog_service(
    db: DatabaseSession,
    store: Annotated[CacheStore | None, Depends(get_cache_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CatalogService:
    """Build the catalog service for the current request.

    Args:
        db: Request-scoped database session.
        store: Shared cache store. Without one, reads are not cached.
        settings: Application settings.

    Returns:
        CatalogService: Service bound to this request's session.
    """
    repository = ProductRepository(db)
    coordinator = CacheAsideCoordinator(
        store if store is not None else NullCacheStore(),
        repository,
        key=settings.cache_config.collection_key,
        ttl=settings.cache_config.ttl,
    )
    return CatalogService(repository, coordinator)


CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
