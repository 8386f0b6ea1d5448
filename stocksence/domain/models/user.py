"""User domain model — maps to the 'users' table."""

import uuid

from sqlalchemy import Column, String, DateTime

from stocksence.domain.models.timestamps import utcnow
from stocksence.infrastructure.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column("fullName", String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column("createdAt", DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<User {self.email}>"
