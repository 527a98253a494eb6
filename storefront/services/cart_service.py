# storefront/services/cart_service.py
import logging
import uuid
from typing import Callable

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItem, CartItemRead, CartItemUpdate, CartSummary
from storefront.services.reconciliation import (
    cart_item_count,
    cart_total,
    dump_items,
    line_total,
    load_items,
    merge_item,
    remove_item,
    set_quantity,
    to_currency,
)

settings = get_settings()
logger = logging.getLogger(__name__)

CartTransform = Callable[[list[CartItem]], list[CartItem]]


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and reject out-of-stock adds
      - apply the pure cart transformations (merge / set / remove)
      - write the cart with a version check, retrying on conflicts
      - compute line totals and cart totals
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _current_items(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        cart = self.cart_repo.get_for_user(session, user_id)
        return load_items(cart.items) if cart else []

    def _write(
        self,
        session: Session,
        user_id: uuid.UUID,
        transform: CartTransform,
        failure_detail: str,
        create: bool = False,
    ) -> list[CartItem]:
        """
        Read-modify-write the user's cart.

        The write only lands if nobody else wrote in between (version
        check); otherwise the cart is re-read and `transform` re-applied,
        up to CART_WRITE_RETRIES times.

        Args:
            create: create the cart row if the user has none yet.

        Raises:
            HTTPException(409): still conflicting after all retries.
            HTTPException(503): record store failure.
        """
        attempts = max(1, settings.CART_WRITE_RETRIES)
        try:
            for attempt in range(1, attempts + 1):
                cart = self.cart_repo.get_for_user(session, user_id)
                if cart is None:
                    if not create:
                        return []
                    try:
                        cart = self.cart_repo.create_for_user(session, user_id)
                    except IntegrityError:
                        # Another request created it first; read theirs
                        session.rollback()
                        continue

                current = load_items(cart.items)
                updated = transform(current)
                if updated == current:
                    return current

                if self.cart_repo.swap_items(session, cart, dump_items(updated)):
                    session.commit()
                    return updated

                session.rollback()
                logger.info(
                    "Cart version conflict for user %s (attempt %d/%d)",
                    user_id,
                    attempt,
                    attempts,
                )
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Cart write failed for user %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=failure_detail,
            )

        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cart was modified by another request, please retry",
        )

    @staticmethod
    def summarize(items: list[CartItem]) -> CartSummary:
        """
        Build the cart response:
          - list of CartItemRead (with line_total)
          - total_quantity
          - total_price
        """
        item_reads = [
            CartItemRead(
                id=it.id,
                name=it.name,
                price=it.price,
                image=it.image,
                quantity=it.quantity,
                line_total=to_currency(line_total(it)),
            )
            for it in items
        ]
        return CartSummary(
            items=item_reads,
            total_quantity=cart_item_count(items),
            total_price=to_currency(cart_total(items)),
        )

    # ---- public operations ----

    def get_cart_summary(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        return self.summarize(self._current_items(session, user_id))

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartSummary:
        """
        Add one unit of a product to the user's cart.

        Rules:
          - product must exist
          - product must be in stock (stock > 0)
          - the cart row is created on first add
        """
        product = self._get_product(session, product_id)

        if product.stock <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is out of stock",
            )

        items = self._write(
            session,
            user_id,
            lambda current: merge_item(current, product),
            failure_detail="Failed to add item to cart",
            create=True,
        )
        return self.summarize(items)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of an item in the cart.

        quantity < 1 is ignored (cart returned unchanged); removing a line
        is an explicit DELETE.
        """
        current = self._current_items(session, user_id)
        if not any(it.id == product_id for it in current):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in cart",
            )

        if payload.quantity < 1:
            return self.summarize(current)

        items = self._write(
            session,
            user_id,
            lambda items: set_quantity(items, product_id, payload.quantity),
            failure_detail="Failed to update cart",
        )
        return self.summarize(items)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartSummary:
        """
        Remove a product from the cart and return the updated summary.
        """
        current = self._current_items(session, user_id)
        if not any(it.id == product_id for it in current):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        items = self._write(
            session,
            user_id,
            lambda items: remove_item(items, product_id),
            failure_detail="Failed to update cart",
        )
        return self.summarize(items)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartSummary:
        """
        Empty the cart (the row itself is kept).
        """
        items = self._write(
            session,
            user_id,
            lambda _: [],
            failure_detail="Failed to update cart",
        )
        return self.summarize(items)
