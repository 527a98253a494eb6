# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.inventory_repo import InventoryRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import CheckoutRead, OrderCreate, OrderRead, OrderStatus
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

service = OrderService(
    OrderRepository(),
    CartRepository(),
    ProductRepository(),
    ProfileRepository(),
    InventoryRepository(),
)


@router.post("/checkout", response_model=CheckoutRead)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Place an order from the current user's cart (demo: nothing is charged).

    Returns the order, the new stock of each product, the loyalty points
    earned and the user's new points balance.
    """
    return service.checkout(session, current_user.id, payload)


@router.get("/me", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
    status: OrderStatus | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, current_user.id, status, skip, limit)


@router.get("/me/{order_id}", response_model=OrderRead)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Get a single order belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)
