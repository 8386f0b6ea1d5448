"""Pydantic schemas for user-facing alerts."""

from datetime import datetime
from typing import Literal

from stocksence.domain.schemas.base import CamelModel

AlertKind = Literal["success", "error", "warning", "info"]


class AlertRead(CamelModel):
    kind: AlertKind
    message: str
    expires_at: datetime
