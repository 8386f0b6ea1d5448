"""Pydantic schemas for dashboard and report payloads."""

from typing import Literal

from stocksence.domain.schemas.base import CamelModel
from stocksence.domain.schemas.product import ProductRead
from stocksence.domain.schemas.sale import SaleRead

TimeWindow = Literal["today", "thisWeek", "thisMonth", "thisYear", "allTime"]


class DashboardStats(CamelModel):
    total_products: int
    low_stock_products: int
    total_sales: int
    revenue: float


class DashboardSummary(CamelModel):
    stats: DashboardStats
    low_stock: list[ProductRead]
    recent_sales: list[SaleRead]


class TopProduct(CamelModel):
    id: str
    name: str
    revenue: float


class SalesReport(CamelModel):
    window: TimeWindow
    total_revenue: float
    total_items: int
    transactions: int
    total_profit: float
    profit_margin: float
    top_products: list[TopProduct]
