"""Sales aggregation for the dashboard and reports.

Every function is a pure mapping from already-fetched sales/products to a
number or a list. Sales are read through ``product_id``, ``product_name``,
``quantity``, ``total_price`` and ``date``.
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Optional, TypeVar

from stocksence.domain.models.timestamps import as_utc

S = TypeVar("S")

TIME_WINDOWS = ("today", "thisWeek", "thisMonth", "thisYear", "allTime")
UNKNOWN_PRODUCT = "Unknown Product"


def _local_midnight(day: date, zone: tzinfo) -> datetime:
    """Midnight of ``day`` with the UTC offset in force on that date."""
    naive = datetime(day.year, day.month, day.day)
    # pytz zones only get the right offset through localize()
    if hasattr(zone, "localize"):
        return zone.localize(naive)
    return naive.replace(tzinfo=zone)


def window_start(window: str, now: datetime) -> Optional[datetime]:
    """Lower bound of a named window, at midnight in ``now``'s timezone.

    Weeks start on Sunday. ``allTime`` has no bound and returns None.
    """
    if window not in TIME_WINDOWS:
        raise ValueError(f"Unknown time window: {window!r}")
    if window == "allTime":
        return None

    now = as_utc(now)
    day = now.date()
    if window == "thisWeek":
        day -= timedelta(days=(day.weekday() + 1) % 7)
    elif window == "thisMonth":
        day = day.replace(day=1)
    elif window == "thisYear":
        day = day.replace(month=1, day=1)
    return _local_midnight(day, now.tzinfo)


def filter_by_time_window(sales: List[S], window: str, now: datetime) -> List[S]:
    start = window_start(window, now)
    if start is None:
        return sales
    return [sale for sale in sales if as_utc(sale.date) >= start]


def aggregate_revenue(sales: Iterable) -> float:
    return sum(sale.total_price for sale in sales)


def aggregate_items(sales: Iterable) -> int:
    return sum(sale.quantity for sale in sales)


def top_products_by_revenue(sales: Iterable, products: Iterable, n: int = 5) -> List[dict]:
    """Revenue per product, highest first; ties keep first-seen order."""
    revenue: "OrderedDict[str, float]" = OrderedDict()
    for sale in sales:
        revenue[sale.product_id] = revenue.get(sale.product_id, 0) + sale.total_price

    names = {p.id: p.name for p in products}
    ranked = [
        {"id": product_id, "name": names.get(product_id, UNKNOWN_PRODUCT), "revenue": total}
        for product_id, total in revenue.items()
    ]
    ranked.sort(key=lambda row: row["revenue"], reverse=True)
    return ranked[:n]


def total_profit(sales: Iterable, products: Iterable) -> float:
    """Revenue minus cost of goods, priced at each product's current cost.

    Sales whose product was deleted count as revenue with no cost.
    """
    sales = list(sales)
    costs = {p.id: p.cost for p in products}
    cost_of_goods = sum(
        costs[sale.product_id] * sale.quantity
        for sale in sales
        if sale.product_id in costs
    )
    return aggregate_revenue(sales) - cost_of_goods


def overall_profit_margin(profit: float, revenue: float) -> float:
    if revenue > 0:
        return profit / revenue * 100
    return 0.0


def filter_sales(sales: Iterable[S], search: str = "", day: str = "") -> List[S]:
    """Sale list filter: product-name substring and an ISO ``YYYY-MM-DD`` day."""
    needle = search.lower()
    result = []
    for sale in sales:
        if needle and needle not in sale.product_name.lower():
            continue
        if day and as_utc(sale.date).date().isoformat() != day:
            continue
        result.append(sale)
    return result
