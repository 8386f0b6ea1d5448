"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from stocksence.application.services.alerts import AlertBuffer
from stocksence.domain.models.product import Product
from stocksence.domain.models.sale import Sale
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.repositories.sale_repository import SaleRepository
from stocksence.domain.schemas.alert import AlertRead
from stocksence.infrastructure.database import get_db
from stocksence.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from stocksence.infrastructure.repositories.sale_repository import SQLAlchemySaleRepository


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Get product repository instance."""
    return SQLAlchemyProductRepository(db, Product)


def get_sale_repository(db: Session = Depends(get_db)) -> SaleRepository:
    """Get sale repository instance (same request session as products)."""
    return SQLAlchemySaleRepository(db, Sale)


def get_alert_buffer() -> AlertBuffer:
    """Per-request alert sink."""
    return AlertBuffer()


def drain_alerts(buffer: AlertBuffer) -> list[AlertRead]:
    """Live alerts of this request, ready for the response body."""
    return [AlertRead.model_validate(a) for a in buffer.drain()]
