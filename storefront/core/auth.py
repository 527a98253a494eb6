# storefront/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.database import get_session
from storefront.models.profile import Profile

settings = get_settings()
logger = logging.getLogger(__name__)

# No header is not an error here: the catalog is public, and require_auth
# decides per route.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Claims of a Supabase access token.

    Checks the HS256 signature and `exp`. `aud` is left alone since Supabase
    sets it per project. Any failure is a 401.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> Profile | None:
    """
    Resolve the current user's profile from a Supabase JWT.

    Flow:
      1. If no Authorization header => anonymous => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Convert 'sub' to UUID to match Profile.id type.
      4. Find the profile in public.profiles.
      5. If missing, create it lazily (role=customer, 0 points).

    Returns:
        Profile if authenticated, else None.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
        HTTPException(409): if the email belongs to a profile with another id.
    """
    if credentials is None:
        return None  # anonymous

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    # Supabase provides sub as a string; enforce UUID
    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    profile = session.get(Profile, sub_uuid)

    # A missing profile is not an error: provision defaults.
    # Vendors must be promoted manually.
    if profile is None:
        profile = Profile(id=sub_uuid, email=email, role="customer", loyalty_points=0)
        session.add(profile)
        try:
            session.commit()
        except IntegrityError:
            # Either a concurrent request created it, or the email is
            # already used by a profile with another id
            session.rollback()
            profile = session.get(Profile, sub_uuid)
            if profile is None:
                logger.warning(
                    "Cannot provision user %s: email already linked to another profile",
                    sub_uuid,
                )
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Email is already linked to another account",
                )
        else:
            logger.info("Provisioned profile for user %s", sub_uuid)
        session.refresh(profile)

    return profile


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Raw access token of an authenticated request."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return credentials.credentials


def require_auth(user: Profile | None = Depends(get_current_user)) -> Profile:
    """
    Enforce authentication.

    Cart, wishlist, order and review mutations all go through this;
    anonymous visitors are told to sign in.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_vendor(user: Profile = Depends(require_auth)) -> Profile:
    """
    Enforce vendor role.

    Raises:
        HTTPException(403): if role is not vendor.
    """
    if user.role != "vendor":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Vendor access required",
        )
    return user
