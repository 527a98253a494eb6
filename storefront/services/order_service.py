# storefront/services/order_service.py
import logging
import uuid
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.models.order import Order
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.inventory_repo import InventoryRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.order import (
    CheckoutRead,
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
)
from storefront.services.reconciliation import (
    can_transition,
    dump_items,
    finalize_order,
    load_items,
    loyalty_points_for,
    to_currency,
)

settings = get_settings()
logger = logging.getLogger(__name__)

CHECKOUT_FAILED = "Failed to process your order. Please try again."


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Turn the cart into an order (via finalize_order)
      - Apply every checkout write in one transaction:
        order insert, loyalty points, product stock + inventory, cart clear
      - Replay a checkout that was already applied (same attempt_id)
      - Enforce status transitions (vendor)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        profile_repo: ProfileRepository,
        inventory_repo: InventoryRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.profile_repo = profile_repo
        self.inventory_repo = inventory_repo

    # -------- User-facing operations --------

    def checkout(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> CheckoutRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. If attempt_id was already used, return that order.
          2. Load cart items; error if empty.
          3. Lock the cart's products and compute the order
             (total, points, clamped stock).
          4. Create Order row (status='pending').
          5. Add loyalty points to the profile.
          6. Write product stock and inventory rows.
          7. Empty the cart (version-checked).
          8. Commit once; any failure rolls everything back.
        """
        # 1) Idempotent replay
        if payload.attempt_id is not None:
            existing = self.order_repo.get_by_attempt(session, user_id, payload.attempt_id)
            if existing:
                return self._replay(session, user_id, existing)

        # 2) Load cart
        cart = self.cart_repo.get_for_user(session, user_id)
        items = load_items(cart.items) if cart else []
        if cart is None or not items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        profile = self.profile_repo.get_by_id(session, user_id)
        current_points = profile.loyalty_points if profile else 0

        try:
            # 3) Compute
            products = self.product_repo.get_many_for_update(
                session, [it.id for it in items]
            )
            product_map = {p.id: p for p in products}
            result = finalize_order(
                user_id,
                items,
                current_points,
                {pid: p.stock for pid, p in product_map.items()},
            )

            if result.oversold:
                if not settings.ALLOW_BACKORDER:
                    session.rollback()
                    raise HTTPException(
                        status_code=status.HTTP_409_CONFLICT,
                        detail={
                            "message": "Insufficient stock",
                            "items": [
                                {"product_id": str(pid), "short_by": short}
                                for pid, short in result.oversold.items()
                            ],
                        },
                    )
                for pid, short in result.oversold.items():
                    logger.warning(
                        "Checkout for user %s oversells product %s by %d",
                        user_id,
                        pid,
                        short,
                    )

            # 4) Order row
            order = Order(
                user_id=user_id,
                items=dump_items(result.order.items),
                total=result.order.total,
                status=result.order.status,
                receiver_name=f"{payload.first_name} {payload.last_name}",
                email=payload.email,
                address=payload.address,
                city=payload.city,
                zip_code=payload.zip_code,
                country=payload.country,
                attempt_id=payload.attempt_id,
            )
            order = self.order_repo.create_order(session, order)

            # 5) Loyalty points
            self.profile_repo.add_loyalty_points(session, user_id, result.points_earned)

            # 6) Stock + inventory
            for pid, new_stock in result.updated_stock.items():
                self.product_repo.set_stock(session, product_map[pid], new_stock)
                self.inventory_repo.upsert_stock(session, pid, new_stock)

            # 7) Clear cart
            if not self.cart_repo.swap_items(session, cart, []):
                session.rollback()
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Cart changed during checkout, please review it and try again",
                )

            # 8) Commit transaction
            session.commit()
        except IntegrityError:
            session.rollback()
            # Same attempt_id committed by a concurrent request
            if payload.attempt_id is not None:
                existing = self.order_repo.get_by_attempt(
                    session, user_id, payload.attempt_id
                )
                if existing:
                    return self._replay(session, user_id, existing)
            logger.exception("Checkout failed for user %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=CHECKOUT_FAILED,
            )
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Checkout failed for user %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=CHECKOUT_FAILED,
            )

        session.refresh(order)
        profile = self.profile_repo.get_by_id(session, user_id)
        loyalty_points = profile.loyalty_points if profile else result.loyalty_points

        logger.info(
            "Order %s placed by user %s: total=%s points=%d",
            order.id,
            user_id,
            to_currency(result.order.total),
            result.points_earned,
        )

        return CheckoutRead(
            order=self._to_read(order),
            updated_stock=result.updated_stock,
            points_earned=result.points_earned,
            loyalty_points=loyalty_points,
        )

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        status_filter: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user, newest first.
        """
        orders = self.order_repo.list_for_user(
            session, user_id, status=status_filter, skip=skip, limit=limit
        )
        return [self._to_read(o) for o in orders]

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order for the user.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self._to_read(order)

    # -------- Vendor operations --------

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Status update with the order state machine:

          pending    -> processing, cancelled
          processing -> shipped, cancelled
          shipped    -> delivered
          delivered  -> (no change)
          cancelled  -> (no change)

        Any invalid transition raises 400.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        current = order.status
        new = payload.status

        if current == new:
            return self._to_read(order)

        if not can_transition(current, new):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        try:
            self.order_repo.update_order(session, order)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Status update failed for order %s", order_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to update order status",
            )
        session.refresh(order)
        return self._to_read(order)

    # -------- Helper DTO builders --------

    def _replay(
        self,
        session: Session,
        user_id: uuid.UUID,
        order: Order,
    ) -> CheckoutRead:
        """
        Result for a checkout that already went through.
        Nothing is written again.
        """
        profile = self.profile_repo.get_by_id(session, user_id)
        logger.info("Checkout replayed for attempt %s (order %s)", order.attempt_id, order.id)
        return CheckoutRead(
            order=self._to_read(order),
            updated_stock={},
            points_earned=loyalty_points_for(Decimal(str(order.total))),
            loyalty_points=profile.loyalty_points if profile else 0,
            replayed=True,
        )

    @staticmethod
    def _to_read(order: Order) -> OrderRead:
        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            items=load_items(order.items),
            total=to_currency(Decimal(str(order.total))),
            status=order.status,  # Literal
            receiver_name=order.receiver_name,
            email=order.email,
            address=order.address,
            city=order.city,
            zip_code=order.zip_code,
            country=order.country,
            created_at=order.created_at,
        )
