# storefront/repositories/order_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.order import Order


class OrderRepository:
    """
    Data access layer for orders.

    NOTE:
      - No commits here; checkout is a multi-step transaction.
        The service is responsible for calling session.commit().
    """

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).where(Order.user_id == user_id)
        if status:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(col(Order.created_at).desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_by_attempt(
        self,
        session: Session,
        user_id: uuid.UUID,
        attempt_id: uuid.UUID,
    ) -> Order | None:
        stmt = select(Order).where(
            Order.user_id == user_id, Order.attempt_id == attempt_id
        )
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        session.refresh(order)
        return order
