"""
SQLAlchemy Implementation of Product Repository.
"""

from datetime import datetime
from typing import List, Optional

from stocksence.domain.models.product import Product
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.infrastructure.repositories.base_repository import SQLAlchemyRepository

ORDERABLE_COLUMNS = {
    "name": Product.name,
    "category": Product.category,
    "quantity": Product.quantity,
    "price": Product.price,
}


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def list_ordered(self, order_by: str = "name") -> List[Product]:
        column = ORDERABLE_COLUMNS[order_by]
        return self.db.query(Product).order_by(column.asc(), Product.id).all()

    def list_in_stock(self) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.quantity > 0)
            .order_by(Product.name.asc())
            .all()
        )

    def set_quantity(self, product_id: str, quantity: int, now: datetime) -> Optional[Product]:
        product = self.get_by_id(product_id)
        if product is None:
            return None
        product.quantity = quantity
        product.updated_at = now
        self.db.commit()
        self.db.refresh(product)
        return product

    def decrement_quantity(self, product_id: str, amount: int, now: datetime) -> Optional[int]:
        updated = (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.quantity >= amount)
            .update(
                {Product.quantity: Product.quantity - amount, Product.updated_at: now},
                synchronize_session="fetch",
            )
        )
        if not updated:
            return None
        return self.db.query(Product.quantity).filter(Product.id == product_id).scalar()

    def distinct_categories(self) -> List[str]:
        rows = self.db.query(Product.category).distinct().filter(Product.category.isnot(None)).all()
        return sorted(r[0] for r in rows)
