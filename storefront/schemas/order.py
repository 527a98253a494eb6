# storefront/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel

from storefront.schemas.cart import CartItem

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class OrderCreate(SQLModel):
    """
    Payload for checking out the current cart.

    User provides shipping details (demo checkout: nothing is charged)
    and optionally an `attempt_id` so a retried submit does not place a
    second order.

    Backend derives:
      - user_id from token
      - items, total and loyalty points from the cart
      - status = 'pending'
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    email: EmailStr
    address: str
    city: str
    zip_code: str
    country: str
    attempt_id: uuid.UUID | None = None

    @field_validator("first_name", "last_name", "address", "city", "zip_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OrderRead(SQLModel):
    """
    Order as shown on the orders page.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    items: list[CartItem]
    total: Decimal
    status: OrderStatus
    receiver_name: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    zip_code: str | None = None
    country: str | None = None
    created_at: datetime


class CheckoutRead(SQLModel):
    """
    Checkout result: everything the client needs to update its state
    without re-fetching.
    """

    order: OrderRead
    updated_stock: dict[uuid.UUID, int]
    points_earned: int
    loyalty_points: int
    replayed: bool = False


class OrderStatusUpdate(SQLModel):
    """
    Vendor payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
