"""Product service — catalog CRUD and product views."""

from typing import Any, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from stocksence.application.services.alerts import AlertSink, notify
from stocksence.application.services.auth_service import require_session
from stocksence.core.exceptions import EntityNotFoundException, ValidationException
from stocksence.domain import stock
from stocksence.domain.models.product import PRODUCT_CATEGORIES, Product
from stocksence.domain.models.timestamps import utcnow
from stocksence.domain.models.user import User
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.schemas.product import ProductCreate, ProductRead, ProductUpdate
from stocksence.infrastructure.database import store_errors

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "cost",
    "quantity",
    "min_quantity",
    "category",
    "image_url",
)


def to_product_read(product: Product) -> ProductRead:
    """Serialize a product together with its derived stock flags and margin."""
    read = ProductRead.model_validate(product)
    return read.model_copy(
        update={
            "is_low_stock": stock.is_low_stock(product),
            "is_out_of_stock": stock.is_out_of_stock(product),
            "profit_margin": stock.profit_margin(product),
        }
    )


def validate_product(data: Union[ProductCreate, Mapping[str, Any]]) -> ProductCreate:
    """Check product fields, raising ValidationException on the first bad one."""
    if isinstance(data, ProductCreate):
        return data
    try:
        return ProductCreate.model_validate(dict(data))
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationException(
            f"Invalid {errors[0]['field']}: {errors[0]['message']}",
            details={"errors": errors},
        ) from exc


def get_product(repo: ProductRepository, product_id: str) -> Product:
    product = repo.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundException("Product not found", details={"product_id": product_id})
    return product


def list_products(repo: ProductRepository, search: str = "", category: str = "") -> List[Product]:
    """All products ordered by name, optionally narrowed by search and category."""
    return stock.filter_products(repo.list_ordered("name"), search=search, category=category)


def category_options(repo: ProductRepository) -> List[str]:
    return stock.category_options(repo.distinct_categories(), suggested=PRODUCT_CATEGORIES)


def create_product(
    repo: ProductRepository,
    data: Union[ProductCreate, Mapping[str, Any]],
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
) -> Product:
    require_session(user)
    payload = validate_product(data).model_dump()
    now = utcnow()

    with store_errors(repo, "create the product"):
        product = repo.create({**payload, "created_at": now, "updated_at": now})

    logger.info("Product created", product_id=product.id, user_id=user.id)
    notify(alerts, "success", "Product created successfully")
    return product


def update_product(
    repo: ProductRepository,
    product_id: str,
    data: Union[ProductUpdate, Mapping[str, Any]],
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
) -> Product:
    require_session(user)
    product = get_product(repo, product_id)

    if isinstance(data, ProductUpdate):
        changes = data.model_dump(exclude_unset=True)
    else:
        changes = dict(data)
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationException(
            "Unknown product fields", details={"fields": sorted(unknown)}
        )

    merged = {field: getattr(product, field) for field in EDITABLE_FIELDS}
    merged.update(changes)
    payload = validate_product(merged).model_dump()

    with store_errors(repo, "update the product"):
        product = repo.update(product, {**payload, "updated_at": utcnow()})

    logger.info("Product updated", product_id=product.id, fields=sorted(changes), user_id=user.id)
    notify(alerts, "success", "Product updated successfully")
    return product


def delete_product(
    repo: ProductRepository,
    product_id: str,
    user: Optional[User],
    alerts: Optional[AlertSink] = None,
) -> Product:
    """Hard delete. Sales that reference the product keep their name snapshot."""
    require_session(user)
    get_product(repo, product_id)

    with store_errors(repo, "delete the product"):
        product = repo.delete(product_id)

    logger.info("Product deleted", product_id=product_id, user_id=user.id)
    notify(alerts, "success", "Product deleted successfully")
    return product
