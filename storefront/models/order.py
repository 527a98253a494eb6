# storefront/models/order.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order.

    Immutable once created, apart from `status`.
    `items` is a value copy of the cart lines at checkout time, so later
    product price/name changes never alter historical orders.
    """

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("user_id", "attempt_id", name="uq_orders_user_attempt"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    items: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    total: Decimal = Field(
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Sum of price x quantity over the snapshot",
    )

    # pending | processing | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    # Shipping details (demo checkout, nothing is charged)
    receiver_name: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    zip_code: str | None = None
    country: str | None = None

    # Client-generated key, unique per user; a retried checkout with the
    # same key returns the existing order instead of creating a second one.
    attempt_id: uuid.UUID | None = Field(
        default=None,
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
