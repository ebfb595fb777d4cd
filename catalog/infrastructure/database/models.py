"""Database models for the catalog."""

from datetime import date

from sqlalchemy import Date, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog.infrastructure.database.base import BaseModel


class ProductModel(BaseModel):
    """Row of the ``product`` table."""

    __tablename__ = "product"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    # Kept textual so the exact decimal representation round-trips
    price: Mapped[str] = mapped_column(String(32), nullable=False)
    quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    created_date: Mapped[date] = mapped_column(
        Date, nullable=False, server_default=func.current_date()
    )
