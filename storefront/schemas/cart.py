# storefront/schemas/cart.py
import uuid
from decimal import Decimal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartItem(SQLModel):
    """
    One cart line, as stored in carts.items and snapshotted into orders.

    `id` is the product id; a cart never holds two lines with the same id.
    """

    id: uuid.UUID
    name: str
    price: Decimal = Field(ge=0)
    image: str | None = None
    quantity: int = Field(ge=1, description="Must be >= 1")


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart. Each add increments by one.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    Values below 1 are accepted here and ignored by the service
    (the line keeps its quantity); use DELETE to remove a line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartItemRead(CartItem):
    """
    Cart line with line_total, for display.
    """

    line_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total_quantity: int
    total_price: Decimal
