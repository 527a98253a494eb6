# storefront/repositories/inventory_repo.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.product import Inventory, Product


class InventoryRepository:
    """
    Inventory tracking rows plus read-only aggregates for the vendor screen.
    """

    def get_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> Inventory | None:
        stmt = select(Inventory).where(Inventory.product_id == product_id)
        return session.exec(stmt).first()

    def upsert_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        stock: int,
    ) -> Inventory:
        """
        Set the tracked stock for a product, creating the row if missing.
        No commit; callers commit together with the product update.
        """
        row = self.get_for_product(session, product_id)
        if row is None:
            row = Inventory(product_id=product_id)
        row.stock = stock
        row.last_updated = datetime.now(timezone.utc)
        session.add(row)
        return row

    def count_products(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product)
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def total_value(self, session: Session) -> Decimal:
        """
        Sum of price x stock over the catalog.
        """
        stmt = select(func.coalesce(func.sum(Product.price * Product.stock), 0))
        value = session.exec(stmt).one()
        return Decimal(str(value or 0))

    def count_low_stock(self, session: Session, threshold: int) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.stock < threshold)
        value = session.exec(stmt).one()
        return int(value or 0)
