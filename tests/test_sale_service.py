from datetime import datetime, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from stocksence.application.services import sale_service
from stocksence.application.services.alerts import AlertBuffer
from stocksence.core.exceptions import (
    EntityNotFoundException,
    InconsistentStateException,
    InsufficientStockException,
    InvalidQuantityException,
    StoreException,
    UnauthorizedException,
)
from stocksence.domain.models.product import Product

NOW = datetime(2026, 10, 21, 15, 30, tzinfo=timezone.utc)


def stored_quantity(db_session, product_id):
    return db_session.query(Product.quantity).filter(Product.id == product_id).scalar()


def test_record_sale_decrements_stock_and_snapshots_product(product_repo, sale_repo, user, make_product):
    product = make_product(name="Desk Lamp", price=19.99, quantity=10)
    alerts = AlertBuffer()

    result = sale_service.record_sale(product_repo, sale_repo, product.id, 2, user, alerts, now=NOW)

    assert result.product_quantity == 8
    assert result.sale.product_id == product.id
    assert result.sale.product_name == "Desk Lamp"
    assert result.sale.total_price == pytest.approx(39.98)
    assert result.sale.quantity == 2
    assert sale_repo.count() == 1
    assert product_repo.get_by_id(product.id).quantity == 8
    assert [(a.kind, a.message) for a in alerts.drain()] == [
        ("success", "Sale recorded successfully"),
    ]


def test_selling_the_whole_stock_warns_out_of_stock(product_repo, sale_repo, user, make_product):
    product = make_product(name="Mug", quantity=3)
    alerts = AlertBuffer()

    result = sale_service.record_sale(product_repo, sale_repo, product.id, 3, user, alerts)

    assert result.product_quantity == 0
    kinds = [a.kind for a in alerts.drain()]
    assert kinds == ["success", "warning"]


def test_selling_into_low_stock_warns(product_repo, sale_repo, user, make_product):
    product = make_product(name="Mug", quantity=7, min_quantity=5)
    alerts = AlertBuffer()

    sale_service.record_sale(product_repo, sale_repo, product.id, 2, user, alerts)

    messages = [a.message for a in alerts.drain()]
    assert messages[-1] == "Mug is running low (5 left)"


def test_oversell_is_rejected_without_writes(db_session, product_repo, sale_repo, user, make_product):
    product = make_product(quantity=3)

    with pytest.raises(InsufficientStockException) as exc_info:
        sale_service.record_sale(product_repo, sale_repo, product.id, 5, user)

    assert exc_info.value.details["available"] == 3
    assert sale_repo.count() == 0
    assert stored_quantity(db_session, product.id) == 3


@pytest.mark.parametrize("quantity", [0, -2])
def test_non_positive_quantity_is_rejected(product_repo, sale_repo, user, make_product, quantity):
    product = make_product()

    with pytest.raises(InvalidQuantityException):
        sale_service.record_sale(product_repo, sale_repo, product.id, quantity, user)

    assert sale_repo.count() == 0


def test_unknown_product(product_repo, sale_repo, user):
    with pytest.raises(EntityNotFoundException):
        sale_service.record_sale(product_repo, sale_repo, "missing", 1, user)


def test_requires_a_session(product_repo, sale_repo, make_product):
    product = make_product()

    with pytest.raises(UnauthorizedException):
        sale_service.record_sale(product_repo, sale_repo, product.id, 1, None)

    assert product_repo.get_by_id(product.id).quantity == 20


def test_stock_taken_by_a_concurrent_sale(db_session, product_repo, sale_repo, user, make_product):
    product = make_product(quantity=3)
    # Another writer drops stock to 1 behind the session's back
    db_session.execute(
        update(Product)
        .where(Product.id == product.id)
        .values(quantity=1)
        .execution_options(synchronize_session=False)
    )
    db_session.commit()

    with pytest.raises(InsufficientStockException):
        sale_service.record_sale(product_repo, sale_repo, product.id, 2, user)

    assert sale_repo.count() == 0
    assert stored_quantity(db_session, product.id) == 1


def test_failed_stock_write_undoes_the_sale(db_session, product_repo, sale_repo, user, make_product, monkeypatch):
    product = make_product(quantity=10)

    def broken_decrement(*args, **kwargs):
        raise OperationalError("UPDATE products", {}, Exception("database is locked"))

    monkeypatch.setattr(product_repo, "decrement_quantity", broken_decrement)

    with pytest.raises(StoreException) as exc_info:
        sale_service.record_sale(product_repo, sale_repo, product.id, 2, user)

    assert exc_info.value.retryable is True
    assert exc_info.value.details["retryable"] is True
    assert sale_repo.count() == 0
    assert stored_quantity(db_session, product.id) == 10


def test_failed_undo_reports_inconsistent_state(product_repo, sale_repo, user, make_product, monkeypatch):
    product = make_product(quantity=10)

    def broken_decrement(*args, **kwargs):
        raise OperationalError("UPDATE products", {}, Exception("connection lost"))

    def broken_rollback():
        raise OperationalError("ROLLBACK", {}, Exception("connection lost"))

    monkeypatch.setattr(product_repo, "decrement_quantity", broken_decrement)
    monkeypatch.setattr(sale_repo, "rollback", broken_rollback)

    with pytest.raises(InconsistentStateException) as exc_info:
        sale_service.record_sale(product_repo, sale_repo, product.id, 2, user)

    assert exc_info.value.details["product_id"] == product.id


def test_sales_survive_product_deletion(product_repo, sale_repo, user, make_product):
    product = make_product(name="Old Stock")
    sale_service.record_sale(product_repo, sale_repo, product.id, 1, user)

    product_repo.delete(product.id)

    [sale] = sale_service.list_sales(sale_repo)
    assert sale.product_name == "Old Stock"
    assert sale.product_id == product.id


def test_list_sales_newest_first_and_filters(product_repo, sale_repo, user, make_product):
    lamp = make_product(name="Desk Lamp", quantity=50)
    mug = make_product(name="Coffee Mug", quantity=50)
    sale_service.record_sale(product_repo, sale_repo, lamp.id, 1, user, now=datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc))
    sale_service.record_sale(product_repo, sale_repo, mug.id, 1, user, now=datetime(2026, 10, 20, 9, 0, tzinfo=timezone.utc))
    sale_service.record_sale(product_repo, sale_repo, lamp.id, 2, user, now=datetime(2026, 10, 21, 9, 0, tzinfo=timezone.utc))

    names = [s.product_name for s in sale_service.list_sales(sale_repo)]
    assert names == ["Desk Lamp", "Coffee Mug", "Desk Lamp"]
    assert len(sale_service.list_sales(sale_repo, search="lamp")) == 2
    assert [s.quantity for s in sale_service.list_sales(sale_repo, search="lamp", day="2026-10-21")] == [2]
    assert len(sale_service.recent_sales(sale_repo, limit=2)) == 2


def test_sellable_products_excludes_empty_stock(make_product, product_repo):
    make_product(name="Zebra Pen", quantity=4)
    make_product(name="Apple Juice", quantity=1)
    make_product(name="Sold Out", quantity=0)

    names = [p.name for p in sale_service.sellable_products(product_repo)]

    assert names == ["Apple Juice", "Zebra Pen"]
