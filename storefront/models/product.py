# storefront/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry.

    Stock is mutated in two places only:
      - checkout (decrement, clamped at 0)
      - vendor stock edit (direct set)
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    category: str | None = Field(
        default=None,
        max_length=50,
        index=True,
        description="Catalog category",
    )

    image: str | None = Field(
        default=None,
        description="Public image URL",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Inventory(SQLModel, table=True):
    """
    Parallel stock-tracking record, one per product.

    Kept in sync with Product.stock by checkout and vendor edits.
    """

    __tablename__ = "inventory"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        unique=True,
        index=True,
    )

    stock: int = Field(default=0, ge=0)

    last_updated: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last time stock was written (UTC)",
    )
