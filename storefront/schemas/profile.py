# storefront/schemas/profile.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. Anonymous visitors have no token, so we don't store them.
Role = Literal["customer", "vendor"]

LoyaltyTierName = Literal["Bronze", "Silver", "Gold"]


class LoyaltyTier(SQLModel):
    """
    Loyalty tier derived from points.

    next_threshold is None once the top tier is reached.
    """

    name: LoyaltyTierName
    next_threshold: int | None
    progress_percent: float


class ProfileRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    email: EmailStr
    full_name: str | None = None
    role: Role
    loyalty_points: int
    tier: LoyaltyTier
    created_at: datetime


class ProfileUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Only editable field is `full_name` here.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(default=None, max_length=100)

    @field_validator("full_name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
