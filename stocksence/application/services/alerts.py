"""User-facing alerts — success/error/warning/info messages that expire.

Operations are handed an ``AlertSink`` explicitly; the HTTP layer uses one
``AlertBuffer`` per request and returns whatever is still live.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Protocol

from stocksence.config import get_settings
from stocksence.domain.models.timestamps import utcnow

ALERT_KINDS = ("success", "error", "warning", "info")


@dataclass(frozen=True)
class Alert:
    kind: str
    message: str
    expires_at: datetime


class AlertSink(Protocol):
    def push(self, kind: str, message: str) -> None:
        ...


class AlertBuffer:
    """Collects alerts; expired ones are dropped when drained."""

    def __init__(
        self,
        duration: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        if duration is None:
            duration = timedelta(seconds=get_settings().ALERT_DURATION_SECONDS)
        self.duration = duration
        self._clock = clock
        self._alerts: List[Alert] = []

    def push(self, kind: str, message: str) -> None:
        if kind not in ALERT_KINDS:
            raise ValueError(f"Unknown alert kind: {kind!r}")
        self._alerts.append(Alert(kind, message, self._clock() + self.duration))

    def drain(self) -> List[Alert]:
        now = self._clock()
        live = [a for a in self._alerts if a.expires_at > now]
        self._alerts.clear()
        return live


def notify(alerts: Optional[AlertSink], kind: str, message: str) -> None:
    if alerts is not None:
        alerts.push(kind, message)
