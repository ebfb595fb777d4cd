"""API routers."""

from catalog.api.routes.products import router as products_router

__all__ = ["products_router"]
