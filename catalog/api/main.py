"""FastAPI application initialization and configuration module.

This module handles:
- Application lifecycle management (database check, cache store setup and teardown)
- Middleware and exception handler registration
- Health check and info endpoints
- Product routes
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from loguru import logger

from catalog.api.dependencies import get_app_settings, get_cache_store
from catalog.api.middleware.error_handler import register_exception_handlers
from catalog.api.middleware.request_context import RequestContextMiddleware
from catalog.api.routes import products_router
from catalog.api.utils.responses import ORJSONResponse
from catalog.core.config import Settings, get_settings
from catalog.core.logging import setup_logging
from catalog.infrastructure.cache import CacheStore, create_cache_store
from catalog.infrastructure.database.session import (
    check_database_connection,
    close_database,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    The database must be reachable for the application to start. The cache
    is optional: an unreachable backend is logged and the application starts
    in degraded mode, serving every read from the database.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    settings: Settings = app_instance.state.settings

    is_healthy, error_msg = await check_database_connection()
    if is_healthy:
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    if app_instance.state.cache_store is None:
        app_instance.state.cache_store = create_cache_store(settings.cache_config)
    cache_store: CacheStore = app_instance.state.cache_store

    probe = await cache_store.ping()
    if probe.is_error:
        logger.warning(
            "Cache backend unreachable at startup, serving reads from the database",
            cache_operation="ping",
            reason=probe.reason,
        )
    else:
        logger.info("Cache backend ready", backend=settings.cache_config.backend)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    try:
        await cache_store.close()
    finally:
        await close_database()
        logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None, cache_store: CacheStore | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().
        cache_store: Optional cache store. If not provided, one is built from
            the cache configuration at startup.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.cache_store = cache_store

    register_exception_handlers(application)
    application.add_middleware(RequestContextMiddleware)
    application.include_router(products_router)

    @application.get("/health")
    async def health(
        store: Annotated[CacheStore | None, Depends(get_cache_store)],
    ) -> dict[str, object]:
        """Health check endpoint for monitoring and container orchestration.

        Reports ``degraded`` when the database is unreachable, or when the
        cache is enabled but its backend does not answer.

        Returns:
            dict[str, object]: Status plus database and cache reachability.
        """
        health_status: dict[str, object] = {
            "status": "healthy",
            "database": False,
            "cache": False,
        }

        is_healthy, error_msg = await check_database_connection()
        health_status["database"] = is_healthy
        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)
            health_status["status"] = "degraded"

        cache_enabled = settings.cache_config.backend != "disabled"
        if store is not None:
            probe = await store.ping()
            health_status["cache"] = not probe.is_error
            if probe.is_error and cache_enabled:
                logger.warning(
                    "Cache health check failed",
                    cache_operation="ping",
                    reason=probe.reason,
                )
                health_status["status"] = "degraded"

        return health_status

    @application.get("/info")
    async def info(
        app_settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> dict[str, Any]:
        """Get application information."""
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
            "cache_backend": app_settings.cache_config.backend,
        }

    return application


app = create_app()
