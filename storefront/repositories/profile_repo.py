# storefront/repositories/profile_repo.py
import uuid

from sqlalchemy import update
from sqlmodel import Session

from storefront.models.profile import Profile


class ProfileRepository:
    """
    Data access layer for Profile.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> Profile | None:
        """Return a Profile by primary key, or None if not found."""
        return session.get(Profile, user_id)

    def create(self, session: Session, profile: Profile) -> Profile:
        """Insert a new Profile and return the persisted row."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    def update(self, session: Session, profile: Profile) -> Profile:
        """Persist changes to an existing Profile."""
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    def add_loyalty_points(
        self,
        session: Session,
        user_id: uuid.UUID,
        points: int,
    ) -> None:
        """
        Increment loyalty points in a single UPDATE.

        No commit; used inside the checkout transaction.
        """
        stmt = (
            update(Profile)
            .where(Profile.id == user_id)
            .values(loyalty_points=Profile.loyalty_points + points)
        )
        session.exec(stmt)
