# storefront/services/profile_service.py
from sqlmodel import Session

from storefront.models.profile import Profile
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.profile import LoyaltyTier, ProfileRead, ProfileUpdate

SILVER_THRESHOLD = 500
GOLD_THRESHOLD = 1000


def loyalty_tier(points: int) -> LoyaltyTier:
    """
    Tier for a points balance:
      - Bronze: < 500
      - Silver: 500 .. 999
      - Gold:   >= 1000 (top tier, no next threshold)
    """
    if points >= GOLD_THRESHOLD:
        return LoyaltyTier(name="Gold", next_threshold=None, progress_percent=100.0)

    if points >= SILVER_THRESHOLD:
        name, target = "Silver", GOLD_THRESHOLD
    else:
        name, target = "Bronze", SILVER_THRESHOLD

    progress = min(100.0, points / target * 100)
    return LoyaltyTier(name=name, next_threshold=target, progress_percent=round(progress, 1))


class ProfileService:
    """
    Business logic for the signed-in user's profile.
    """

    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    @staticmethod
    def to_read(profile: Profile) -> ProfileRead:
        return ProfileRead.model_validate(
            profile, update={"tier": loyalty_tier(profile.loyalty_points)}
        )

    def get_me(self, current_user: Profile) -> ProfileRead:
        """Return the current authenticated user's profile."""
        return self.to_read(current_user)

    def update_me(
        self,
        session: Session,
        current_user: Profile,
        payload: ProfileUpdate,
    ) -> ProfileRead:
        """
        Partial update for profile edits.
        Role and loyalty points are not editable here.
        """
        if payload.full_name is not None:
            current_user.full_name = payload.full_name

        return self.to_read(self.repo.update(session, current_user))
