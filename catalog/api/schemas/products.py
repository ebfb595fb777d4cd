"""Product request and response bodies."""

from pydantic import BaseModel, Field


class ProductCreated(BaseModel):
    """Response body of a successful create."""

    id: int = Field(..., gt=0, description="Identifier of the new product")
