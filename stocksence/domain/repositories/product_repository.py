"""
Product Repository Interface.
Defines specific data access operations for Products.
"""

from datetime import datetime
from typing import List, Optional

from stocksence.domain.repositories.base import BaseRepository
from stocksence.domain.models.product import Product


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def list_ordered(self, order_by: str = "name") -> List[Product]:
        """All products ordered by a column."""
        ...

    def list_in_stock(self) -> List[Product]:
        """Products with at least one unit on hand."""
        ...

    def set_quantity(self, product_id: str, quantity: int, now: datetime) -> Optional[Product]:
        """Overwrite the stock level and commit; None if the product is gone."""
        ...

    def decrement_quantity(self, product_id: str, amount: int, now: datetime) -> Optional[int]:
        """Take ``amount`` units off stock without committing.

        Only applies while enough stock remains. Returns the new quantity,
        or None when no row was changed.
        """
        ...

    def distinct_categories(self) -> List[str]:
        """Categories currently in use."""
        ...
