"""Repository implementations for database operations.

``BaseRepository`` provides async CRUD operations for any model inheriting
from ``BaseModel`` and translates driver and connectivity failures into
``RecordSourceError``. ``ProductRepository`` is the catalog's record source:
it validates writes and returns ``ProductRecord`` values.
"""

from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.exceptions import NotFoundError, RecordSourceError, ValidationError
from catalog.domain.products import ProductData, ProductRecord
from catalog.infrastructure.database.base import BaseModel
from catalog.infrastructure.database.models import ProductModel


class BaseRepository[T: BaseModel]:
    """Base repository class providing common CRUD operations.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, User)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    @asynccontextmanager
    async def _database_errors(self, operation: str) -> AsyncGenerator[None]:
        """Re-raise driver and connectivity failures as RecordSourceError.

        Args:
            operation: Name of the repository operation, for context.
        """
        try:
            yield
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                "Database error during {} on {}: {}",
                operation,
                self.model_class.__name__,
                type(e).__name__,
            )
            raise RecordSourceError(
                f"Record store unavailable during {operation}",
                context={"model": self.model_class.__name__, "operation": operation},
                cause=e,
            ) from e

    async def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        async with self._database_errors("get_by_id"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> list[T]:
        """Retrieve all model instances ordered by ID.

        Returns:
            list[T]: List of model instances.
        """
        stmt = select(self.model_class).order_by(self.model_class.id)
        async with self._database_errors("get_all"):
            result = await self.session.execute(stmt)
        instances = list(result.scalars().all())

        logger.debug(
            "Retrieved {} {} instances", len(instances), self.model_class.__name__
        )
        return instances

    async def add(self, obj: T) -> T:
        """Insert a new model instance.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created instance with its ID and server defaults populated.
        """
        self.session.add(obj)
        async with self._database_errors("add"):
            await self.session.flush()
            await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )
        return obj

    async def update_fields(
        self, entity_id: int, data: Mapping[str, object]
    ) -> T | None:
        """Update a model instance by its ID with partial data.

        Args:
            entity_id: The primary key ID of the model to update.
            data: Dictionary of fields to update.

        Returns:
            T | None: The updated model instance if found, None otherwise.
        """
        instance = await self.get_by_id(entity_id)
        if instance is None:
            logger.debug(
                "{} instance not found for update - ID: {}",
                self.model_class.__name__,
                entity_id,
            )
            return None

        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
            else:
                logger.warning(
                    "Attempted to update non-existent field '{}' on {}",
                    key,
                    self.model_class.__name__,
                )

        async with self._database_errors("update"):
            await self.session.flush()
            await self.session.refresh(instance)

        logger.info(
            "Updated {} instance ID {} - fields: {}",
            self.model_class.__name__,
            entity_id,
            list(data.keys()),
        )
        return instance

    async def delete_by_id(self, entity_id: int) -> bool:
        """Delete a model instance by its ID.

        Args:
            entity_id: The primary key ID of the model to delete.

        Returns:
            bool: True if a row was deleted, False if none matched.
        """
        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        async with self._database_errors("delete"):
            result = await self.session.execute(stmt)

        deleted = result.rowcount > 0
        if deleted:
            logger.info(
                "Deleted {} instance with ID: {}", self.model_class.__name__, entity_id
            )
        else:
            logger.debug(
                "{} instance not found for deletion - ID: {}",
                self.model_class.__name__,
                entity_id,
            )
        return deleted

    async def commit(self) -> None:
        """Commit the current transaction."""
        async with self._database_errors("commit"):
            await self.session.commit()


def _require_positive_id(product_id: int) -> None:
    if product_id <= 0:
        raise ValidationError(
            "Product ID must be greater than zero",
            context={"product_id": product_id},
        )


def _require_text_fields(data: ProductData) -> None:
    blank = data.blank_required_fields()
    if blank:
        raise ValidationError(
            "name, category and price are required fields",
            context={"blank_fields": blank},
        )


class ProductRepository(BaseRepository[ProductModel]):
    """Record source for catalog products."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProductModel)

    async def list_all(self) -> list[ProductRecord]:
        """Return every product ordered by ID.

        Raises:
            RecordSourceError: If the database cannot be queried.
        """
        return [ProductRecord.model_validate(row) for row in await self.get_all()]

    async def create(self, data: ProductData) -> ProductRecord:
        """Insert a product.

        Args:
            data: Fields of the new product. A missing ``created_date``
                defaults to the current date.

        Returns:
            ProductRecord: The stored product with its new ID.

        Raises:
            ValidationError: If name, category or price is blank.
            RecordSourceError: If the database cannot be reached.
        """
        _require_text_fields(data)
        row = await self.add(ProductModel(**data.model_dump(exclude_none=True)))
        return ProductRecord.model_validate(row)

    async def update(self, product_id: int, data: ProductData) -> ProductRecord:
        """Replace the fields of an existing product.

        Args:
            product_id: ID of the product to update.
            data: New field values. A missing ``created_date`` keeps the
                stored one.

        Returns:
            ProductRecord: The updated product.

        Raises:
            ValidationError: If the ID is not positive or a required field is blank.
            NotFoundError: If no product has this ID.
            RecordSourceError: If the database cannot be reached.
        """
        _require_positive_id(product_id)
        _require_text_fields(data)

        row = await self.update_fields(product_id, data.model_dump(exclude_none=True))
        if row is None:
            raise NotFoundError(
                f"Product with ID {product_id} not found",
                context={"product_id": product_id},
            )
        return ProductRecord.model_validate(row)

    async def delete(self, product_id: int) -> bool:
        """Delete a product.

        Args:
            product_id: ID of the product to delete.

        Returns:
            bool: True if a product was removed. Deleting an unknown ID is
                not an error.

        Raises:
            ValidationError: If the ID is not positive.
            RecordSourceError: If the database cannot be reached.
        """
        _require_positive_id(product_id)
        return await self.delete_by_id(product_id)
