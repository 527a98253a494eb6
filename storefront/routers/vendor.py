# storefront/routers/vendor.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_vendor
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.inventory_repo import InventoryRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import OrderRead, OrderStatusUpdate
from storefront.schemas.product import ProductRead, StockUpdate
from storefront.schemas.vendor import InventorySummary
from storefront.services.order_service import OrderService
from storefront.services.vendor_service import VendorService

router = APIRouter(
    prefix="/vendor",
    tags=["Vendor"],
    dependencies=[Depends(require_vendor)],
)

product_repo = ProductRepository()
inventory_repo = InventoryRepository()
service = VendorService(product_repo, inventory_repo)
order_service = OrderService(
    OrderRepository(),
    CartRepository(),
    product_repo,
    ProfileRepository(),
    inventory_repo,
)


@router.get("/products", response_model=list[ProductRead])
def list_products(session: Session = Depends(get_session)):
    """
    All products ordered by name.

    Only accessible to users with role='vendor'.
    """
    return service.list_products(session)


@router.get("/summary", response_model=InventorySummary)
def get_summary(session: Session = Depends(get_session)):
    """
    Total products, inventory value (price x stock) and low-stock count.
    """
    return service.get_summary(session)


@router.patch("/products/{product_id}/stock", response_model=ProductRead)
def update_stock(
    product_id: uuid.UUID,
    payload: StockUpdate,
    session: Session = Depends(get_session),
):
    """
    Set a product's stock; the inventory record follows.
    """
    return service.update_stock(session, product_id, payload.stock)


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Move an order along its lifecycle:

      pending    -> processing, cancelled

      processing -> shipped, cancelled

      shipped    -> delivered

    """
    return order_service.update_status(session, order_id, payload)
