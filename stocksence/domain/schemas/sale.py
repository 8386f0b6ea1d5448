"""Pydantic schemas for Sale domain."""

from datetime import datetime

from stocksence.domain.schemas.alert import AlertRead
from stocksence.domain.schemas.base import CamelModel


class SaleCreate(CamelModel):
    product_id: str
    quantity: int


class SaleRead(CamelModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    total_price: float
    date: datetime


class SaleRecordedRead(CamelModel):
    sale: SaleRead
    product_quantity: int
    alerts: list[AlertRead] = []


class SaleList(CamelModel):
    items: list[SaleRead]
    total_revenue: float
    total_items: int
