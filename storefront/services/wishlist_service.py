# storefront/services/wishlist_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from storefront.models.product import Product
from storefront.models.wishlist import WishlistItem
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.cart import CartSummary
from storefront.schemas.wishlist import WishlistItemRead
from storefront.services.cart_service import CartService

logger = logging.getLogger(__name__)


class WishlistService:
    """
    Business logic for wishlists.

    Adding a product twice is not an error: the duplicate insert is
    suppressed and the existing entry returned.
    """

    def __init__(
        self,
        repo: WishlistRepository,
        product_repo: ProductRepository,
        cart_service: CartService,
    ):
        self.repo = repo
        self.product_repo = product_repo
        self.cart_service = cart_service

    @staticmethod
    def _to_read(entry: WishlistItem, product: Product) -> WishlistItemRead:
        return WishlistItemRead.model_validate(entry, update={"product": product})

    def _get_own_entry(
        self,
        session: Session,
        user_id: uuid.UUID,
        entry_id: uuid.UUID,
    ) -> WishlistItem:
        entry = self.repo.get_by_id(session, entry_id)
        if not entry or entry.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Wishlist item not found",
            )
        return entry

    def list_wishlist(self, session: Session, user_id: uuid.UUID) -> list[WishlistItemRead]:
        rows = self.repo.list_for_user(session, user_id)
        return [self._to_read(entry, product) for entry, product in rows]

    def add(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistItemRead:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        try:
            entry = self.repo.create(
                session, WishlistItem(user_id=user_id, product_id=product_id)
            )
        except IntegrityError:
            # Already wishlisted
            session.rollback()
            entry = self.repo.get_entry(session, user_id, product_id)
            if entry is None:
                logger.exception("Wishlist insert failed for user %s", user_id)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Failed to add item to wishlist",
                )
            product = self.product_repo.get_by_id(session, product_id)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Wishlist insert failed for user %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to add item to wishlist",
            )

        return self._to_read(entry, product)

    def remove(self, session: Session, user_id: uuid.UUID, entry_id: uuid.UUID) -> None:
        entry = self._get_own_entry(session, user_id, entry_id)
        try:
            self.repo.delete(session, entry)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Wishlist delete failed for entry %s", entry_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to remove item from wishlist",
            )

    def move_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        entry_id: uuid.UUID,
    ) -> CartSummary:
        """
        Add the wishlisted product to the cart (entry is kept).
        Same rules as a regular add.
        """
        entry = self._get_own_entry(session, user_id, entry_id)
        return self.cart_service.add_to_cart(session, user_id, entry.product_id)
