"""Sale service — record sales and keep stock in step with them.

Recording a sale writes two rows: the new ``sales`` row and the product's
decremented quantity. Both go through one transaction. ``product_repo`` and
``sale_repo`` must therefore share a Session.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from stocksence.application.services.alerts import AlertSink, notify
from stocksence.application.services.auth_service import require_session
from stocksence.application.services.product_service import get_product
from stocksence.core.exceptions import (
    InconsistentStateException,
    InsufficientStockException,
    InvalidQuantityException,
    StoreException,
)
from stocksence.domain import reporting
from stocksence.domain.models.sale import Sale
from stocksence.domain.models.timestamps import utcnow
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.repositories.sale_repository import SaleRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SaleRecorded:
    sale: Sale
    product_quantity: int


def _rollback(sale_repo: SaleRepository, product_id: str) -> None:
    try:
        sale_repo.rollback()
    except SQLAlchemyError as exc:
        logger.critical("Sale rollback failed", product_id=product_id, error=str(exc))
        raise InconsistentStateException(
            "The sale could not be completed or undone; check the product's stock",
            details={"product_id": product_id},
        ) from exc


def record_sale(
    product_repo: ProductRepository,
    sale_repo: SaleRepository,
    product_id: str,
    quantity: int,
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
    now: Optional[datetime] = None,
) -> SaleRecorded:
    """Sell ``quantity`` units of a product at its current price."""
    require_session(user)
    if quantity <= 0:
        raise InvalidQuantityException(
            "Quantity must be greater than 0", details={"quantity": quantity}
        )

    product = get_product(product_repo, product_id)
    if quantity > product.quantity:
        raise InsufficientStockException(
            f"Only {product.quantity} items available in stock",
            details={"product_id": product_id, "available": product.quantity, "requested": quantity},
        )

    now = now or utcnow()
    sale = Sale(
        product_id=product.id,
        product_name=product.name,
        quantity=quantity,
        total_price=product.price * quantity,
        date=now,
    )

    try:
        sale_repo.add(sale)
        remaining = product_repo.decrement_quantity(product.id, quantity, now)
        if remaining is None:
            # Another sale took the stock between our read and this write
            _rollback(sale_repo, product_id)
            raise InsufficientStockException(
                "Stock changed while recording the sale; not enough units left",
                details={"product_id": product_id, "requested": quantity},
            )
        sale_repo.commit()
    except SQLAlchemyError as exc:
        logger.error("Sale write failed", product_id=product_id, error=str(exc))
        _rollback(sale_repo, product_id)
        raise StoreException(
            "Could not record the sale; nothing was saved. Please try again.",
            details={"product_id": product_id},
        ) from exc

    logger.info(
        "Sale recorded",
        sale_id=sale.id,
        product_id=product_id,
        quantity=quantity,
        total_price=sale.total_price,
        remaining=remaining,
        user_id=user.id,
    )
    notify(alerts, "success", "Sale recorded successfully")
    if remaining == 0:
        notify(alerts, "warning", f"{sale.product_name} is now out of stock")
    elif remaining <= product.min_quantity:
        notify(alerts, "warning", f"{sale.product_name} is running low ({remaining} left)")
    return SaleRecorded(sale=sale, product_quantity=remaining)


def list_sales(sale_repo: SaleRepository, search: str = "", day: str = "") -> List[Sale]:
    """Sales newest first, narrowed by product name and ISO day."""
    return reporting.filter_sales(sale_repo.list_recent(), search=search, day=day)


def recent_sales(sale_repo: SaleRepository, limit: int = 5) -> List[Sale]:
    return sale_repo.list_recent(limit=limit)


def sellable_products(product_repo: ProductRepository) -> list:
    """Products that can be picked on the sale form."""
    return product_repo.list_in_stock()
