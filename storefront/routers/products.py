# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product import ProductDetail, ProductQuery, ProductWithRating
from storefront.schemas.review import ReviewCreate, ReviewRead
from storefront.services.product_service import ProductService
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
review_repo = ReviewRepository()
service = ProductService(repo, review_repo)
review_service = ReviewService(review_repo, repo)


# -------- Public endpoints --------


@router.get("", response_model=list[ProductWithRating])
def list_products(
    session: Session = Depends(get_session),
    category: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """
    List products with their average rating.

    - `category` filters on exact category.
    - `search` matches name or description, case-insensitive.
    """
    query = ProductQuery(category=category, search=search)
    return service.list_products(session, query, skip=skip, limit=limit)


@router.get("/featured", response_model=list[ProductWithRating])
def list_featured(session: Session = Depends(get_session)):
    """Home page selection."""
    return service.list_featured(session)


@router.get("/categories", response_model=list[str])
def list_categories(session: Session = Depends(get_session)):
    """Distinct, non-empty product categories."""
    return service.list_categories(session)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Product page: product, reviews (newest first) and average rating.
    """
    return service.get_product_detail(session, product_id)


@router.get("/{product_id}/related", response_model=list[ProductWithRating])
def list_related(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """Other products from the same category."""
    return service.list_related(session, product_id)


@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
def list_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.list_reviews(session, product_id)


# -------- Signed-in endpoints --------


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_review(
    product_id: uuid.UUID,
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Submit a 1-5 star review with an optional comment.
    """
    return review_service.submit_review(session, current_user, product_id, payload)
