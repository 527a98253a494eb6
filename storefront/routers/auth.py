# storefront/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from supabase import Client

from storefront.core.auth import get_bearer_token
from storefront.core.supabase_client import get_auth_client
from storefront.database import get_session
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.auth import AuthSession, SignInRequest, SignUpRequest
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService(ProfileRepository())


@router.post(
    "/sign-up",
    response_model=AuthSession,
    status_code=status.HTTP_201_CREATED,
)
def sign_up(
    payload: SignUpRequest,
    session: Session = Depends(get_session),
    client: Client = Depends(get_auth_client),
):
    """
    Create an account with email + password.

    Tokens are empty when the Supabase project requires email
    confirmation before the first sign-in.
    """
    return service.sign_up(session, client, payload)


@router.post("/sign-in", response_model=AuthSession)
def sign_in(
    payload: SignInRequest,
    client: Client = Depends(get_auth_client),
):
    """Password sign-in; returns the Supabase session tokens."""
    return service.sign_in(client, payload)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
def sign_out(
    token: str = Depends(get_bearer_token),
    client: Client = Depends(get_auth_client),
):
    """Sign out the session of the bearer token."""
    service.sign_out(client, token)
    return None
