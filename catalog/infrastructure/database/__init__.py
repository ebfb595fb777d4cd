"""Database infrastructure with async PostgreSQL and repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: The ``product`` table
- **session**: Async engine and session management
- **repository**: Generic CRUD repository and the product record source
- **dependencies**: FastAPI dependency injection helpers
"""

from catalog.infrastructure.database.base import Base, BaseModel
from catalog.infrastructure.database.dependencies import DatabaseSession, get_db
from catalog.infrastructure.database.models import ProductModel
from catalog.infrastructure.database.repository import (
    BaseRepository,
    ProductRepository,
)
from catalog.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "DatabaseSession",
    "ProductModel",
    "ProductRepository",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "get_async_session",
    "get_db",
    "get_engine",
    "get_session_factory",
]
