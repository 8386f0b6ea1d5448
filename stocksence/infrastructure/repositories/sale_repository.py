"""
SQLAlchemy Implementation of Sale Repository.
"""

from typing import List

from sqlalchemy import func

from stocksence.domain.models.sale import Sale
from stocksence.domain.repositories.sale_repository import SaleRepository
from stocksence.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemySaleRepository(SQLAlchemyRepository[Sale], SaleRepository):
    """Sale repository implementation using SQLAlchemy."""

    def add(self, sale: Sale) -> Sale:
        self.db.add(sale)
        self.db.flush()
        return sale

    def list_recent(self, limit: int | None = None) -> List[Sale]:
        query = self.db.query(Sale).order_by(Sale.date.desc(), Sale.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def total_revenue(self) -> float:
        return float(self.db.query(func.coalesce(func.sum(Sale.total_price), 0)).scalar())
