# storefront/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.review import ReviewRead


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None = None
    price: Decimal
    stock: int
    category: str | None = None
    image: str | None = None
    created_at: datetime


class ProductWithRating(ProductRead):
    """
    Catalog card: product plus its derived rating.
    """

    average_rating: float
    review_count: int


class ProductDetail(ProductWithRating):
    """
    Product page: rated product plus its reviews (newest first).
    """

    reviews: list[ReviewRead]


class StockUpdate(SQLModel):
    """
    Vendor payload to set a product's stock.
    """

    model_config = ConfigDict(extra="forbid")

    stock: int = Field(ge=0)


class ProductQuery(SQLModel):
    """
    Catalog filters (category + free-text search).
    """

    category: str | None = None
    search: str | None = None

    @field_validator("category", "search")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None
