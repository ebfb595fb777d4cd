"""Application services coordinating persistence and caching."""

from catalog.services.catalog import CatalogService

__all__ = ["CatalogService"]
