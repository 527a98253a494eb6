# storefront/models/profile.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    """
    Persistent storefront profile.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "customer" | "vendor"
      - anonymous visitors have no row / no token.

    Passwords live in Supabase Auth. This table only mirrors identity,
    application role and the loyalty points accumulator.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users",
    )

    full_name: str | None = Field(
        default=None,
        max_length=100,
        description="Optional display name",
    )

    # Application role (not Supabase RLS role)
    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | vendor",
    )

    # Only ever increased, by checkout
    loyalty_points: int = Field(
        default=0,
        ge=0,
        description="Loyalty points accumulated from orders",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
