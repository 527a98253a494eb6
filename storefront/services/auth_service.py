# storefront/services/auth_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from supabase import AuthError, Client

from storefront.models.profile import Profile
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.auth import AuthSession, SignInRequest, SignUpRequest

logger = logging.getLogger(__name__)


class AuthService:
    """
    Thin layer over Supabase Auth.

    Responsibilities:
      - sign-up / sign-in / sign-out through the Supabase client
      - create the profile row right after sign-up
      - map Supabase auth errors to HTTP errors
    """

    def __init__(self, profile_repo: ProfileRepository):
        self.profile_repo = profile_repo

    @staticmethod
    def _to_session(response) -> AuthSession:
        user = response.user
        session = response.session
        return AuthSession(
            user_id=uuid.UUID(str(user.id)),
            email=user.email,
            access_token=session.access_token if session else None,
            refresh_token=session.refresh_token if session else None,
            expires_in=session.expires_in if session else None,
        )

    def sign_up(
        self,
        session: Session,
        client: Client,
        payload: SignUpRequest,
    ) -> AuthSession:
        """
        Create the auth user, then its profile (role=customer, 0 points).

        A failed profile insert does not fail sign-up: the profile is
        created lazily on the first authenticated request instead.
        """
        try:
            response = client.auth.sign_up(
                {"email": payload.email, "password": payload.password}
            )
        except AuthError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=e.message,
            )

        if response.user is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sign-up failed",
            )

        result = self._to_session(response)

        if self.profile_repo.get_by_id(session, result.user_id) is None:
            profile = Profile(
                id=result.user_id,
                email=result.email,
                full_name=payload.full_name,
                role="customer",
                loyalty_points=0,
            )
            try:
                self.profile_repo.create(session, profile)
            except SQLAlchemyError:
                session.rollback()
                logger.exception("Error creating profile for user %s", result.user_id)

        return result

    def sign_in(self, client: Client, payload: SignInRequest) -> AuthSession:
        try:
            response = client.auth.sign_in_with_password(
                {"email": payload.email, "password": payload.password}
            )
        except AuthError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message,
            )
        return self._to_session(response)

    def sign_out(self, client: Client, access_token: str) -> None:
        """Revoke the session that owns `access_token`."""
        try:
            client.auth.admin.sign_out(access_token)
        except AuthError as e:
            logger.warning("Sign-out failed: %s", e.message)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=e.message,
            )
