"""Product entities.

``ProductRecord`` is a persisted product as read back from the record store.
It is also the element type of the cached collection snapshot, so its field
set defines the cache payload layout.

``ProductData`` carries the writable fields of a product for create and
update operations.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

REQUIRED_TEXT_FIELDS = ("name", "category", "price")


class ProductRecord(BaseModel):
    """A product stored in the catalog."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., gt=0, description="Identifier assigned by the database")
    name: str = Field(..., description="Product name")
    category: str = Field(..., description="Product category")
    price: str = Field(..., description="Price in its textual decimal form")
    quantity: int = Field(default=0, description="Units in stock")
    created_date: date = Field(..., description="Date the product was created")


class ProductData(BaseModel):
    """Writable product fields."""

    name: str = Field(..., max_length=200, examples=["Notebook"])
    category: str = Field(..., max_length=100, examples=["Stationery"])
    price: str = Field(..., max_length=32, examples=["12.90"])
    quantity: int = Field(default=0, ge=0, examples=[10])
    created_date: date | None = Field(
        default=None,
        description="Creation date. Defaults to the current date on insert.",
    )

    def blank_required_fields(self) -> list[str]:
        """Return the names of required text fields that are blank.

        Returns:
            list[str]: Field names whose value is empty or whitespace only.
        """
        return [
            field for field in REQUIRED_TEXT_FIELDS if not getattr(self, field).strip()
        ]
