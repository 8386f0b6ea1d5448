"""
Sale Repository Interface.
Defines specific data access operations for Sales.
"""

from typing import List

from stocksence.domain.repositories.base import BaseRepository
from stocksence.domain.models.sale import Sale


class SaleRepository(BaseRepository[Sale]):
    """Interface for Sale-specific operations."""

    def add(self, sale: Sale) -> Sale:
        """Stage a sale in the current transaction (flush, no commit)."""
        ...

    def list_recent(self, limit: int | None = None) -> List[Sale]:
        """Sales newest first."""
        ...

    def total_revenue(self) -> float:
        """Sum of total_price over every sale."""
        ...
