# storefront/models/cart.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Cart(SQLModel, table=True):
    """
    Shopping cart, one row per user.

    `items` is an ordered JSON list of cart lines
    ({id, name, price, image, quantity}); product ids are unique within it.

    `version` is bumped on every write. Writers only succeed if the version
    they read is still current (see CartRepository.swap_items).

    The row is created lazily on first add and never deleted; checkout
    empties `items`.
    """

    __tablename__ = "carts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        unique=True,
        index=True,
    )

    items: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    version: int = Field(default=0, ge=0)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
