"""Domain models shared by the persistence, cache and API layers."""

from catalog.domain.products import ProductData, ProductRecord

__all__ = ["ProductData", "ProductRecord"]
