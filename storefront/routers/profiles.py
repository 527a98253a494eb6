# storefront/routers/profiles.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.profile import ProfileRead, ProfileUpdate
from storefront.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])

repo = ProfileRepository()
service = ProfileService(repo)


@router.get("/me", response_model=ProfileRead)
def read_me(current_user: Profile = Depends(require_auth)):
    """
    Return the authenticated user's profile, loyalty points and tier.

    The profile row is created on the first authenticated request if
    sign-up did not create it.
    """
    return service.get_me(current_user)


@router.patch("/me", response_model=ProfileRead)
def update_me(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Currently, only `full_name` is editable.
    """
    return service.update_me(session, current_user, payload)
