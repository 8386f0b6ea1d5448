"""Products API routes — catalog CRUD."""

from fastapi import APIRouter, Depends, status

from stocksence.application.services.alerts import AlertBuffer
from stocksence.application.services.product_service import (
    category_options,
    create_product,
    delete_product,
    get_product,
    list_products,
    to_product_read,
    update_product,
)
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.schemas.alert import AlertRead
from stocksence.domain.schemas.base import CamelModel
from stocksence.domain.schemas.product import ProductCreate, ProductRead, ProductUpdate
from stocksence.interfaces.api.deps import get_current_user
from stocksence.interfaces.deps import drain_alerts, get_alert_buffer, get_product_repository

router = APIRouter(prefix="/api/products", tags=["Products"])


class ProductMutation(CamelModel):
    product: ProductRead
    alerts: list[AlertRead] = []


class ProductDeleted(CamelModel):
    id: str
    alerts: list[AlertRead] = []


@router.get("", response_model=list[ProductRead])
def list_all(
    search: str = "",
    category: str = "",
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    return [to_product_read(p) for p in list_products(repo, search=search, category=category)]


@router.get("/categories", response_model=list[str])
def categories(
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    """Suggested categories plus any free-text ones already in use."""
    return category_options(repo)


@router.get("/{product_id}", response_model=ProductRead)
def get_one(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    return to_product_read(get_product(repo, product_id))


@router.post("", response_model=ProductMutation, status_code=status.HTTP_201_CREATED)
def create(
    body: ProductCreate,
    repo: ProductRepository = Depends(get_product_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    product = create_product(repo, body, user, alerts)
    return ProductMutation(product=to_product_read(product), alerts=drain_alerts(alerts))


@router.put("/{product_id}", response_model=ProductMutation)
def update(
    product_id: str,
    body: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    product = update_product(repo, product_id, body, user, alerts)
    return ProductMutation(product=to_product_read(product), alerts=drain_alerts(alerts))


@router.delete("/{product_id}", response_model=ProductDeleted)
def delete(
    product_id: str,
    repo: ProductRepository = Depends(get_product_repository),
    alerts: AlertBuffer = Depends(get_alert_buffer),
    user: User = Depends(get_current_user),
):
    delete_product(repo, product_id, user, alerts)
    return ProductDeleted(id=product_id, alerts=drain_alerts(alerts))
