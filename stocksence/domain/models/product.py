"""Product domain model — maps to the 'products' table."""

import uuid

from sqlalchemy import Column, Integer, String, Float, DateTime, Text

from stocksence.domain.models.timestamps import utcnow
from stocksence.infrastructure.database import Base

DEFAULT_MIN_QUANTITY = 5

PRODUCT_CATEGORIES = [
    "Electronics",
    "Clothing",
    "Food",
    "Beverages",
    "Home Goods",
    "Office Supplies",
    "Beauty",
    "Health",
    "Other",
]


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False, default=0.0)
    cost = Column(Float, nullable=False, default=0.0)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column("minQuantity", Integer, nullable=False, default=DEFAULT_MIN_QUANTITY)
    category = Column(String(100), nullable=False, index=True)
    image_url = Column("imageUrl", String(1000), nullable=True)

    created_at = Column("createdAt", DateTime(timezone=True), default=utcnow)
    updated_at = Column("updatedAt", DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Product {self.id} - {self.name}>"
