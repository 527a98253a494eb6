# storefront/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import update
from sqlmodel import Session, select

from storefront.models.cart import Cart


class CartRepository:

    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def create_for_user(self, session: Session, user_id: uuid.UUID) -> Cart:
        """
        Create an empty cart. The unique user_id constraint makes a
        concurrent second create fail with IntegrityError.
        """
        cart = Cart(user_id=user_id, items=[])
        session.add(cart)
        session.commit()
        session.refresh(cart)
        return cart

    def swap_items(
        self,
        session: Session,
        cart: Cart,
        items: list[dict[str, Any]],
    ) -> bool:
        """
        Compare-and-swap the cart's items.

        Writes only if the row still has the version we read; bumps the
        version on success. No commit here.

        Returns:
            True if the row was updated, False on a version conflict.
        """
        stmt = (
            update(Cart)
            .where(Cart.id == cart.id, Cart.version == cart.version)
            .values(
                items=items,
                version=cart.version + 1,
                updated_at=datetime.now(timezone.utc),
            )
        )
        result = session.exec(stmt)
        return result.rowcount == 1
