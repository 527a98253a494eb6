# storefront/repositories/wishlist_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.product import Product
from storefront.models.wishlist import WishlistItem


class WishlistRepository:

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[tuple[WishlistItem, Product]]:
        """Wishlist entries joined with their products, oldest first."""
        stmt = (
            select(WishlistItem, Product)
            .join(Product, Product.id == WishlistItem.product_id)
            .where(WishlistItem.user_id == user_id)
            .order_by(col(WishlistItem.created_at))
        )
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, entry_id: uuid.UUID) -> WishlistItem | None:
        return session.get(WishlistItem, entry_id)

    def get_entry(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def create(self, session: Session, entry: WishlistItem) -> WishlistItem:
        """
        Insert an entry. Raises IntegrityError if the (user, product)
        pair already exists.
        """
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry

    def delete(self, session: Session, entry: WishlistItem) -> None:
        session.delete(entry)
        session.commit()
