"""Inventory service — stock level adjustments and the inventory view."""

from typing import Optional

import structlog

from stocksence.application.services.alerts import AlertSink, notify
from stocksence.application.services.auth_service import require_session
from stocksence.application.services.product_service import (
    category_options,
    get_product,
    to_product_read,
)
from stocksence.core.exceptions import EntityNotFoundException, InvalidQuantityException
from stocksence.domain import stock
from stocksence.domain.models.product import Product
from stocksence.domain.models.timestamps import utcnow
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.schemas.product import InventoryOverview, InventoryTotals, ProductFilter
from stocksence.infrastructure.database import store_errors

logger = structlog.get_logger(__name__)


def adjust_quantity(
    repo: ProductRepository,
    product_id: str,
    new_quantity: int,
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
) -> Product:
    """Set a product's stock to ``new_quantity`` (must be >= 0)."""
    require_session(user)
    if new_quantity < 0:
        raise InvalidQuantityException(
            "Quantity cannot be negative", details={"quantity": new_quantity}
        )

    with store_errors(repo, "update inventory"):
        product = repo.set_quantity(product_id, new_quantity, utcnow())
    if product is None:
        raise EntityNotFoundException("Product not found", details={"product_id": product_id})

    logger.info(
        "Inventory adjusted",
        product_id=product_id,
        quantity=new_quantity,
        user_id=user.id,
    )
    notify(alerts, "success", "Inventory updated successfully")
    if stock.is_out_of_stock(product):
        notify(alerts, "warning", f"{product.name} is out of stock")
    elif stock.is_low_stock(product):
        notify(alerts, "warning", f"{product.name} is running low ({product.quantity} left)")
    return product


def increment(
    repo: ProductRepository,
    product_id: str,
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
    step: int = 1,
) -> Product:
    require_session(user)
    product = get_product(repo, product_id)
    return adjust_quantity(repo, product_id, product.quantity + step, user, alerts)


def decrement(
    repo: ProductRepository,
    product_id: str,
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
    step: int = 1,
) -> Product:
    require_session(user)
    product = get_product(repo, product_id)
    return adjust_quantity(repo, product_id, product.quantity - step, user, alerts)


def inventory_overview(repo: ProductRepository, filters: ProductFilter) -> InventoryOverview:
    """Filtered and sorted products plus stock totals over the whole catalog."""
    products = repo.list_ordered("name")
    selected = stock.filter_products(
        products,
        search=filters.search,
        category=filters.category,
        stock_filter=filters.stock,
    )
    selected = stock.sort_products(selected, field=filters.sort, order=filters.order)

    return InventoryOverview(
        items=[to_product_read(p) for p in selected],
        totals=InventoryTotals(**stock.inventory_totals(products)),
        categories=category_options(repo),
    )
