"""Report service — dashboard summary and time-windowed sales reports."""

from datetime import datetime
from typing import Optional

import pytz

from stocksence.application.services.product_service import to_product_read
from stocksence.application.services.sale_service import recent_sales
from stocksence.config import get_settings
from stocksence.domain import reporting, stock
from stocksence.domain.repositories.product_repository import ProductRepository
from stocksence.domain.repositories.sale_repository import SaleRepository
from stocksence.domain.schemas.report import (
    DashboardStats,
    DashboardSummary,
    SalesReport,
    TopProduct,
)
from stocksence.domain.schemas.sale import SaleRead

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)

DEFAULT_WINDOW = "thisMonth"
RECENT_SALES_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5


def get_current_time() -> datetime:
    """Now in the configured timezone, so report windows start at local midnight."""
    return datetime.now(tz)


def dashboard_summary(product_repo: ProductRepository, sale_repo: SaleRepository) -> DashboardSummary:
    products = product_repo.list_ordered("name")
    low = stock.low_stock(products)

    return DashboardSummary(
        stats=DashboardStats(
            total_products=len(products),
            low_stock_products=len(low),
            total_sales=sale_repo.count(),
            revenue=sale_repo.total_revenue(),
        ),
        low_stock=[to_product_read(p) for p in low],
        recent_sales=[
            SaleRead.model_validate(s) for s in recent_sales(sale_repo, limit=RECENT_SALES_LIMIT)
        ],
    )


def sales_report(
    product_repo: ProductRepository,
    sale_repo: SaleRepository,
    window: str = DEFAULT_WINDOW,
    now: Optional[datetime] = None,
) -> SalesReport:
    """Revenue, profit and best sellers for the sales inside ``window``."""
    now = now or get_current_time()
    products = product_repo.list()
    sales = reporting.filter_by_time_window(sale_repo.list_recent(), window, now)

    revenue = reporting.aggregate_revenue(sales)
    profit = reporting.total_profit(sales, products)

    return SalesReport(
        window=window,
        total_revenue=revenue,
        total_items=reporting.aggregate_items(sales),
        transactions=len(sales),
        total_profit=profit,
        profit_margin=reporting.overall_profit_margin(profit, revenue),
        top_products=[
            TopProduct(**row)
            for row in reporting.top_products_by_revenue(sales, products, n=TOP_PRODUCTS_LIMIT)
        ],
    )
