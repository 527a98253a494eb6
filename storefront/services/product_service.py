# storefront/services/product_service.py
import uuid
from typing import Sequence

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.product import Product
from storefront.models.review import Review
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product import ProductDetail, ProductQuery, ProductWithRating
from storefront.schemas.review import ReviewRead
from storefront.services.reconciliation import average_rating

FEATURED_LIMIT = 8
RELATED_LIMIT = 4


class ProductService:
    """
    Catalog reads.

    Every product handed to clients carries its aggregate rating,
    computed per product from its reviews.
    """

    def __init__(self, repo: ProductRepository, review_repo: ReviewRepository):
        self.repo = repo
        self.review_repo = review_repo

    # ----- Helpers -----

    @staticmethod
    def _rated(product: Product, reviews: Sequence[Review]) -> ProductWithRating:
        return ProductWithRating.model_validate(
            product,
            update={
                "average_rating": average_rating(reviews),
                "review_count": len(reviews),
            },
        )

    def _with_ratings(
        self,
        session: Session,
        products: list[Product],
    ) -> list[ProductWithRating]:
        reviews = self.repo.reviews_by_product(session, [p.id for p in products])
        return [self._rated(p, reviews[p.id]) for p in products]

    # ----- Products -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def list_products(
        self,
        session: Session,
        query: ProductQuery,
        skip: int = 0,
        limit: int = 50,
    ) -> list[ProductWithRating]:
        products = self.repo.list_products(
            session,
            category=query.category,
            search=query.search,
            skip=skip,
            limit=limit,
        )
        return self._with_ratings(session, products)

    def list_featured(self, session: Session) -> list[ProductWithRating]:
        products = self.repo.list_products(session, limit=FEATURED_LIMIT)
        return self._with_ratings(session, products)

    def list_categories(self, session: Session) -> list[str]:
        return self.repo.list_categories(session)

    def list_related(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductWithRating]:
        """
        Up to RELATED_LIMIT other products from the same category.
        """
        product = self.get_product(session, product_id)
        related = self.repo.list_related(session, product, limit=RELATED_LIMIT)
        return self._with_ratings(session, related)

    def list_reviews(self, session: Session, product_id: uuid.UUID) -> list[ReviewRead]:
        """Reviews newest first, with author email."""
        self.get_product(session, product_id)
        rows = self.review_repo.list_for_product(session, product_id)
        return [
            ReviewRead.model_validate(review, update={"author_email": email})
            for review, email in rows
        ]

    def get_product_detail(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> ProductDetail:
        """
        Product page payload: product, reviews and average rating.
        """
        product = self.get_product(session, product_id)
        reviews = self.list_reviews(session, product_id)
        return ProductDetail.model_validate(
            product,
            update={
                "average_rating": average_rating(reviews),
                "review_count": len(reviews),
                "reviews": reviews,
            },
        )
