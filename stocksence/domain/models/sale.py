"""Sale domain model — maps to the 'sales' table.

product_id is a plain reference, not a foreign key: deleting a product leaves
its sales in place, and product_name keeps the name as it was at sale time.
"""

import uuid

from sqlalchemy import Column, Integer, String, Float, DateTime

from stocksence.domain.models.timestamps import utcnow
from stocksence.infrastructure.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column("productId", String(36), nullable=False, index=True)
    product_name = Column("productName", String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    total_price = Column("totalPrice", Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<Sale {self.product_name} x{self.quantity}>"
