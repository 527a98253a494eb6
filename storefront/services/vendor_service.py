# storefront/services/vendor_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.models.product import Product
from storefront.repositories.inventory_repo import InventoryRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.vendor import InventorySummary
from storefront.services.reconciliation import to_currency

settings = get_settings()
logger = logging.getLogger(__name__)


class VendorService:
    """
    Vendor inventory screen: product list, headline figures, stock edits.
    """

    def __init__(self, product_repo: ProductRepository, inventory_repo: InventoryRepository):
        self.product_repo = product_repo
        self.inventory_repo = inventory_repo

    def list_products(self, session: Session) -> list[Product]:
        return self.product_repo.list_by_name(session)

    def get_summary(self, session: Session) -> InventorySummary:
        threshold = settings.LOW_STOCK_THRESHOLD
        return InventorySummary(
            total_products=self.inventory_repo.count_products(session),
            total_inventory_value=to_currency(self.inventory_repo.total_value(session)),
            low_stock_count=self.inventory_repo.count_low_stock(session, threshold),
            low_stock_threshold=threshold,
        )

    def update_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        stock: int,
    ) -> Product:
        """
        Set a product's stock directly.

        Writes the product and its inventory row together.
        """
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        try:
            self.product_repo.set_stock(session, product, stock)
            self.inventory_repo.upsert_stock(session, product_id, stock)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Stock update failed for product %s", product_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to update stock",
            )

        session.refresh(product)
        logger.info("Stock for product %s set to %d", product_id, stock)
        return product
