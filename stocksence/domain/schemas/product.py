"""Pydantic schemas for Product domain."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from stocksence.domain.models.product import DEFAULT_MIN_QUANTITY
from stocksence.domain.schemas.base import CamelModel

StockFilter = Literal["all", "low", "out", "normal"]
SortField = Literal["name", "category", "quantity", "price"]
SortOrder = Literal["asc", "desc"]


class ProductBase(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    price: float = Field(ge=0)
    cost: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0)
    min_quantity: int = Field(default=DEFAULT_MIN_QUANTITY, ge=0)
    category: str = Field(min_length=1, max_length=100)
    image_url: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    """Partial update; unset fields keep their stored value."""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    cost: Optional[float] = None
    quantity: Optional[int] = None
    min_quantity: Optional[int] = None
    category: Optional[str] = None
    image_url: Optional[str] = None


class ProductRead(ProductBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_low_stock: bool = False
    is_out_of_stock: bool = False
    profit_margin: Optional[float] = None


class ProductFilter(CamelModel):
    search: str = ""
    category: str = ""
    stock: StockFilter = "all"
    sort: SortField = "name"
    order: SortOrder = "asc"


class QuantityUpdate(CamelModel):
    quantity: int


class InventoryTotals(CamelModel):
    total_items: int
    low_stock: int
    out_of_stock: int


class InventoryOverview(CamelModel):
    items: list[ProductRead]
    totals: InventoryTotals
    categories: list[str]
