# storefront/schemas/wishlist.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from storefront.schemas.product import ProductRead


class WishlistItemCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID


class WishlistItemRead(SQLModel):
    """
    Wishlist entry joined with its product.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    created_at: datetime
    product: ProductRead
