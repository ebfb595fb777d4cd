"""Catalog use cases.

Writes go to the record source, are committed, and only then invalidate the
cached collection, so the next read after a successful write reloads from
the database. Invalidation failures never change a write's outcome.
"""

from loguru import logger

from catalog.domain.products import ProductData, ProductRecord
from catalog.infrastructure.cache.coordinator import CacheAsideCoordinator
from catalog.infrastructure.database.repository import ProductRepository


class CatalogService:
    """Product reads and writes for one request.

    Args:
        repository: Record source bound to the request's session.
        coordinator: Cache-aside coordinator over the same record source.
    """

    def __init__(
        self, repository: ProductRepository, coordinator: CacheAsideCoordinator
    ) -> None:
        self._repository = repository
        self._coordinator = coordinator

    async def list_products(self) -> list[ProductRecord]:
        logger.info("Fetching products")
        products = await self._coordinator.fetch_collection()
        logger.info("Returning {} products", len(products))
        return products

    async def create_product(self, data: ProductData) -> ProductRecord:
        """Create a product and invalidate the cached collection.

        Args:
            data: Fields of the new product.

        Returns:
            ProductRecord: The created product.
        """
        logger.info(
            "Creating product: {} {} - {}", data.name, data.category, data.price
        )
        product = await self._repository.create(data)
        await self._repository.commit()
        await self._coordinator.invalidate()

        logger.info("Product created - ID: {}", product.id)
        return product

    async def update_product(self, product_id: int, data: ProductData) -> ProductRecord:
        """Update a product and invalidate the cached collection.

        Args:
            product_id: ID of the product to update.
            data: New field values.

        Returns:
            ProductRecord: The updated product.
        """
        logger.info(
            "Updating product ID: {} - {} {} - {}",
            product_id,
            data.name,
            data.category,
            data.price,
        )
        product = await self._repository.update(product_id, data)
        await self._repository.commit()
        await self._coordinator.invalidate()

        logger.info("Product updated - ID: {}", product_id)
        return product

    async def delete_product(self, product_id: int) -> bool:
        """Delete a product and invalidate the cached collection.

        Args:
            product_id: ID of the product to delete.

        Returns:
            bool: True if a product was removed.
        """
        logger.info("Deleting product ID: {}", product_id)
        deleted = await self._repository.delete(product_id)
        await self._repository.commit()
        await self._coordinator.invalidate()

        logger.info("Product delete finished - ID: {}, removed: {}", product_id, deleted)
        return deleted
