# storefront/services/review_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.models.profile import Profile
from storefront.models.review import Review
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import ReviewCreate, ReviewRead

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, repo: ReviewRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def submit_review(
        self,
        session: Session,
        author: Profile,
        product_id: uuid.UUID,
        payload: ReviewCreate,
    ) -> ReviewRead:
        """
        Store a review for an existing product.

        Rating range (1..5) and comment trimming come from ReviewCreate.
        """
        if not self.product_repo.get_by_id(session, product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        review = Review(
            product_id=product_id,
            user_id=author.id,
            rating=payload.rating,
            comment=payload.comment,
        )
        try:
            review = self.repo.create(session, review)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Review submit failed for product %s", product_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to submit review",
            )

        return ReviewRead.model_validate(review, update={"author_email": author.email})
