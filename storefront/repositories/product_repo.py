# storefront/repositories/product_repo.py
import uuid

from sqlmodel import Session, col, or_, select

from storefront.models.product import Product
from storefront.models.review import Review


class ProductRepository:
    """
    Data access layer for Product (and the reviews joined onto it).

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def list_products(
        self,
        session: Session,
        category: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        stmt = select(Product)
        if category:
            stmt = stmt.where(Product.category == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern),
                    col(Product.description).ilike(pattern),
                )
            )
        stmt = stmt.order_by(col(Product.created_at).desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_by_name(self, session: Session) -> list[Product]:
        stmt = select(Product).order_by(Product.name)
        return list(session.exec(stmt).all())

    def list_related(
        self,
        session: Session,
        product: Product,
        limit: int = 4,
    ) -> list[Product]:
        """Other products from the same category."""
        if not product.category:
            return []
        stmt = (
            select(Product)
            .where(Product.category == product.category, Product.id != product.id)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_categories(self, session: Session) -> list[str]:
        stmt = (
            select(Product.category)
            .where(col(Product.category).is_not(None))
            .distinct()
            .order_by(Product.category)
        )
        return [c for c in session.exec(stmt).all() if c]

    def get_many_for_update(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> list[Product]:
        """
        Load products and lock their rows until the transaction ends.
        """
        if not product_ids:
            return []
        stmt = (
            select(Product)
            .where(col(Product.id).in_(product_ids))
            .with_for_update()
        )
        return list(session.exec(stmt).all())

    def set_stock(self, session: Session, product: Product, stock: int) -> Product:
        """Set stock without committing."""
        product.stock = stock
        session.add(product)
        return product

    # ----- Reviews (joined sub-selection) -----

    def reviews_by_product(
        self,
        session: Session,
        product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, list[Review]]:
        """
        Reviews for a page of products, grouped by product id.
        Every requested id is present in the result (possibly empty).
        """
        grouped: dict[uuid.UUID, list[Review]] = {pid: [] for pid in product_ids}
        if not product_ids:
            return grouped
        stmt = select(Review).where(col(Review.product_id).in_(product_ids))
        for review in session.exec(stmt).all():
            grouped[review.product_id].append(review)
        return grouped
