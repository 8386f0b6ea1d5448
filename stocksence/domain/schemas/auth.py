"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from stocksence.domain.schemas.base import CamelModel


class UserCreate(CamelModel):
    email: str
    password: str
    full_name: str


class UserRead(CamelModel):
    id: str
    email: str
    full_name: str
    created_at: Optional[datetime] = None


class LoginRequest(CamelModel):
    email: str
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead
