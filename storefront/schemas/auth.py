# storefront/schemas/auth.py
import uuid

from pydantic import EmailStr, ConfigDict, model_validator
from sqlmodel import SQLModel, Field


class SignInRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class SignUpRequest(SQLModel):
    """
    Payload for creating an account.

    Validation rules:
      - password and confirm_password must match
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str
    full_name: str | None = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def passwords_match(self) -> "SignUpRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class AuthSession(SQLModel):
    """
    Session returned by Supabase Auth.

    Tokens are None when sign-up requires email confirmation first.
    """

    user_id: uuid.UUID
    email: str
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
