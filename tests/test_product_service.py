import pytest

from stocksence.application.services import product_service
from stocksence.application.services.alerts import AlertBuffer
from stocksence.core.exceptions import (
    EntityNotFoundException,
    UnauthorizedException,
    ValidationException,
)
from stocksence.domain.models.product import DEFAULT_MIN_QUANTITY, PRODUCT_CATEGORIES

LAMP = {
    "name": "Desk Lamp",
    "description": "LED lamp",
    "price": 10.0,
    "cost": 4.0,
    "quantity": 20,
    "category": "Home Goods",
}


def test_create_product_with_defaults(product_repo, user):
    alerts = AlertBuffer()

    product = product_service.create_product(product_repo, LAMP, user, alerts)

    assert product.id
    assert product.min_quantity == DEFAULT_MIN_QUANTITY
    assert product.created_at is not None
    assert [a.message for a in alerts.drain()] == ["Product created successfully"]


def test_product_read_carries_derived_fields(product_repo, user):
    product = product_service.create_product(product_repo, LAMP, user)

    read = product_service.to_product_read(product)

    assert read.profit_margin == pytest.approx(60.0)
    assert read.is_low_stock is False
    assert read.is_out_of_stock is False
    dumped = read.model_dump(by_alias=True)
    assert dumped["minQuantity"] == DEFAULT_MIN_QUANTITY
    assert dumped["isLowStock"] is False


@pytest.mark.parametrize(
    "override, field",
    [
        ({"name": "   "}, "name"),
        ({"price": -1}, "price"),
        ({"cost": -0.5}, "cost"),
        ({"quantity": -3}, "quantity"),
        ({"category": ""}, "category"),
    ],
)
def test_invalid_products_are_rejected_before_any_write(product_repo, user, override, field):
    with pytest.raises(ValidationException) as exc_info:
        product_service.create_product(product_repo, {**LAMP, **override}, user)

    assert exc_info.value.details["errors"][0]["field"] == field
    assert product_repo.count() == 0


def test_create_requires_a_session(product_repo):
    with pytest.raises(UnauthorizedException):
        product_service.create_product(product_repo, LAMP, None)


def test_update_merges_changes(product_repo, user, make_product):
    product = make_product(name="Desk Lamp", price=10.0)

    updated = product_service.update_product(product_repo, product.id, {"price": 12.5}, user)

    assert updated.price == 12.5
    assert updated.name == "Desk Lamp"
    assert updated.cost == 4.0


def test_update_rejects_unknown_and_invalid_fields(product_repo, user, make_product):
    product = make_product()

    with pytest.raises(ValidationException):
        product_service.update_product(product_repo, product.id, {"sku": "X-1"}, user)
    with pytest.raises(ValidationException):
        product_service.update_product(product_repo, product.id, {"quantity": -1}, user)

    assert product_repo.get_by_id(product.id).quantity == 20


def test_update_missing_product(product_repo, user):
    with pytest.raises(EntityNotFoundException):
        product_service.update_product(product_repo, "missing", {"price": 1}, user)


def test_delete_product(product_repo, user, make_product):
    product = make_product()
    alerts = AlertBuffer()

    product_service.delete_product(product_repo, product.id, user, alerts)

    assert product_repo.get_by_id(product.id) is None
    assert [a.message for a in alerts.drain()] == ["Product deleted successfully"]
    with pytest.raises(EntityNotFoundException):
        product_service.delete_product(product_repo, product.id, user)


def test_list_products_by_name_and_category(product_repo, make_product):
    make_product(name="Zinc Tape", category="Office Supplies")
    make_product(name="Apple Cider", category="Beverages")
    make_product(name="Apple Slicer", category="Home Goods")

    assert [p.name for p in product_service.list_products(product_repo)] == [
        "Apple Cider",
        "Apple Slicer",
        "Zinc Tape",
    ]
    assert [p.name for p in product_service.list_products(product_repo, search="apple", category="Home Goods")] == [
        "Apple Slicer",
    ]


def test_category_options_include_free_text_categories(product_repo, make_product):
    make_product(category="Aquarium")
    make_product(category="Food")

    options = product_service.category_options(product_repo)

    assert options[: len(PRODUCT_CATEGORIES)] == PRODUCT_CATEGORIES
    assert options[len(PRODUCT_CATEGORIES):] == ["Aquarium"]
