# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.cart import CartSummary
from storefront.schemas.wishlist import WishlistItemCreate, WishlistItemRead
from storefront.services.cart_service import CartService
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

product_repo = ProductRepository()
cart_service = CartService(CartRepository(), product_repo)
service = WishlistService(WishlistRepository(), product_repo, cart_service)


@router.get("", response_model=list[WishlistItemRead])
def get_my_wishlist(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """Wishlist entries with their product (price, stock, category, ...)."""
    return service.list_wishlist(session, current_user.id)


@router.post("", response_model=WishlistItemRead)
def add_to_wishlist(
    payload: WishlistItemCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Add a product to the wishlist.

    Adding an already wishlisted product returns the existing entry.
    """
    return service.add(session, current_user.id, payload.product_id)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(
    entry_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    service.remove(session, current_user.id, entry_id)
    return None


@router.post("/{entry_id}/cart", response_model=CartSummary)
def move_to_cart(
    entry_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Add the wishlisted product to the cart.
    """
    return service.move_to_cart(session, current_user.id, entry_id)
