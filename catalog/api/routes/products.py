"""Product endpoints."""

from fastapi import APIRouter, Response, status

from catalog.api.constants import PRODUCTS_PATH
from catalog.api.dependencies import CatalogServiceDep
from catalog.api.schemas.products import ProductCreated
from catalog.domain.products import ProductData, ProductRecord

router = APIRouter(prefix=PRODUCTS_PATH, tags=["products"])


@router.get("")
async def list_products(service: CatalogServiceDep) -> list[ProductRecord]:
    """List every product, served from the cache when possible."""
    return await service.list_products()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductData, service: CatalogServiceDep, response: Response
) -> ProductCreated:
    """Create a product.

    Returns:
        ProductCreated: The identifier of the new product.
    """
    product = await service.create_product(payload)
    response.headers["Location"] = PRODUCTS_PATH
    return ProductCreated(id=product.id)


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_product(
    product_id: int, payload: ProductData, service: CatalogServiceDep
) -> Response:
    """Replace the fields of a product."""
    await service.update_product(product_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, service: CatalogServiceDep) -> Response:
    """Delete a product. Deleting an unknown ID also answers 204."""
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
