# storefront/services/reconciliation.py
"""
Cart / order reconciliation rules.

Pure functions only: no sessions, no HTTP. Services load records, call
these, and persist whatever comes back.

  - merge_item / set_quantity / remove_item : cart line transformations
  - finalize_order                           : totals, loyalty points, stock
  - average_rating                           : derived product rating
"""
import math
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping, Protocol, Sequence

from storefront.schemas.cart import CartItem

CURRENCY_QUANT = Decimal("0.01")

# Allowed order status transitions. Checkout only ever creates "pending".
ORDER_STATUS_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


class CartProduct(Protocol):
    id: uuid.UUID
    name: str
    price: Decimal
    image: str | None


class Rated(Protocol):
    rating: int


@dataclass(frozen=True)
class OrderDraft:
    user_id: uuid.UUID
    items: tuple[CartItem, ...]
    total: Decimal
    status: str = "pending"


@dataclass(frozen=True)
class OrderFinalization:
    """
    Result of finalize_order.

    updated_stock: new stock per product id, only for products that exist.
    oversold:      units requested beyond available stock, per product id.
    """

    order: OrderDraft
    updated_stock: dict[uuid.UUID, int]
    points_earned: int
    loyalty_points: int
    oversold: dict[uuid.UUID, int] = field(default_factory=dict)


# ---- cart lines ----


def load_items(raw: Iterable[Mapping[str, Any]]) -> list[CartItem]:
    """Parse stored JSON cart lines."""
    return [CartItem.model_validate(entry) for entry in raw]


def dump_items(items: Iterable[CartItem]) -> list[dict[str, Any]]:
    """Serialize cart lines for a JSON column (value copy)."""
    return [item.model_dump(mode="json") for item in items]


def merge_item(items: Sequence[CartItem], product: CartProduct) -> list[CartItem]:
    """
    Add one unit of `product`.

    Existing line => copy with that line's quantity + 1, order kept.
    Otherwise a new line with quantity 1 is appended.
    No stock check here; callers reject out-of-stock products first.
    """
    merged: list[CartItem] = []
    found = False
    for item in items:
        if item.id == product.id:
            merged.append(item.model_copy(update={"quantity": item.quantity + 1}))
            found = True
        else:
            merged.append(item.model_copy())

    if not found:
        merged.append(
            CartItem(
                id=product.id,
                name=product.name,
                price=product.price,
                image=product.image,
                quantity=1,
            )
        )
    return merged


def set_quantity(
    items: Sequence[CartItem],
    product_id: uuid.UUID,
    new_quantity: int,
) -> list[CartItem]:
    """
    Replace the quantity of one line.

    new_quantity < 1 is rejected: the sequence comes back unchanged.
    """
    if new_quantity < 1:
        return list(items)
    return [
        item.model_copy(update={"quantity": new_quantity}) if item.id == product_id else item
        for item in items
    ]


def remove_item(items: Sequence[CartItem], product_id: uuid.UUID) -> list[CartItem]:
    return [item for item in items if item.id != product_id]


def line_total(item: CartItem) -> Decimal:
    return item.price * item.quantity


def cart_total(items: Iterable[CartItem]) -> Decimal:
    """Full-precision total; round only for display."""
    return sum((line_total(item) for item in items), Decimal("0"))


def cart_item_count(items: Iterable[CartItem]) -> int:
    return sum(item.quantity for item in items)


def to_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CURRENCY_QUANT)


# ---- checkout ----


def loyalty_points_for(total: Decimal) -> int:
    """One point per whole currency unit, truncated."""
    return max(0, math.floor(total))


def finalize_order(
    user_id: uuid.UUID,
    cart_items: Sequence[CartItem],
    current_loyalty_points: int,
    stock_levels: Mapping[uuid.UUID, int],
) -> OrderFinalization:
    """
    Compute everything checkout writes.

    Args:
        user_id: owner of the order.
        cart_items: non-empty cart lines (caller checks emptiness).
        current_loyalty_points: profile points before this order.
        stock_levels: current stock per product id. Products missing from
            the mapping no longer exist and get no stock update.

    Stock is clamped at 0, never negative; overselling is reported in
    `oversold`, not refused.
    """
    total = cart_total(cart_items)
    points = loyalty_points_for(total)

    remaining = dict(stock_levels)
    updated_stock: dict[uuid.UUID, int] = {}
    oversold: dict[uuid.UUID, int] = {}

    for item in cart_items:
        if item.id not in remaining:
            continue
        available = remaining[item.id]
        if item.quantity > available:
            oversold[item.id] = oversold.get(item.id, 0) + item.quantity - available
        remaining[item.id] = max(0, available - item.quantity)
        updated_stock[item.id] = remaining[item.id]

    draft = OrderDraft(
        user_id=user_id,
        items=tuple(item.model_copy() for item in cart_items),
        total=total,
    )
    return OrderFinalization(
        order=draft,
        updated_stock=updated_stock,
        points_earned=points,
        loyalty_points=current_loyalty_points + points,
        oversold=oversold,
    )


def can_transition(current: str, new: str) -> bool:
    return new in ORDER_STATUS_TRANSITIONS.get(current, set())


# ---- reviews ----


def average_rating(reviews: Iterable[Rated]) -> float:
    """Arithmetic mean of `rating`; 0 when there are no reviews."""
    ratings = [review.rating for review in reviews]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)
