"""Inventory API routes — stock view and quantity adjustments."""

from fastapi import APIRouter, Depends

from stocksence.application.services.alerts import AlertBuffer
from stocksence.application.services.inventory_service import (
    adjust_quantity,
    decrement,
    increment,
    inventory_overview,
)
from stocksence.application.services.product_service import to_product_read
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.schemas.alert import AlertRead
from stocksence.domain.schemas.base import CamelModel
from stocksence.domain.schemas.product import (
    InventoryOverview,
    ProductFilter,
    ProductRead,
    QuantityUpdate,
    SortField,
    SortOrder,
    StockFilter,
)
from stocksence.interfaces.api.deps import get_current_user
from stocksence.interfaces.deps import drain_alerts, get_alert_buffer, get_product_repository

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])


class StockChange(CamelModel):
    product: ProductRead
    alerts: list[AlertRead] = []


@router.get("", response_model=InventoryOverview)
def overview(
    search: str = "",
    category: str = "",
    stock: StockFilter = "all",
    sort: SortField = "name",
    order: SortOrder = "asc",
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    filters = ProductFilter(search=search, category=category, stock=stock, sort=sort, order=order)
    return inventory_overview(repo, filters)


@router.put("/{product_id}", response_model=StockChange)
def set_quantity(
    product_id: str,
    body: QuantityUpdate,
    repo: ProductRepository = Depends(get_product_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    product = adjust_quantity(repo, product_id, body.quantity, user, alerts)
    return StockChange(product=to_product_read(product), alerts=drain_alerts(alerts))


@router.post("/{product_id}/increment", response_model=StockChange)
def add_one(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    product = increment(repo, product_id, user, alerts)
    return StockChange(product=to_product_read(product), alerts=drain_alerts(alerts))


@router.post("/{product_id}/decrement", response_model=StockChange)
def remove_one(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    product = decrement(repo, product_id, user, alerts)
    return StockChange(product=to_product_read(product), alerts=drain_alerts(alerts))
