"""
Uniform response envelope shared by every route.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Literal, Optional

from pydantic import BaseModel


class Envelope(BaseModel):
    """Standard response format."""

    status: Literal["success", "error"]
    message: str
    data: Optional[Any] = None
    timestamp: str
    uptime: int
    retryAfter: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, keeping ``data`` only on success and ``retryAfter`` only when set."""
        payload: Dict[str, Any] = {
            "status": self.status,
            "message": self.message,
        }
        if self.status == "success":
            payload["data"] = self.data
        payload["timestamp"] = self.timestamp
        payload["uptime"] = self.uptime
        if self.retryAfter is not None:
            payload["retryAfter"] = self.retryAfter
        return payload


def format_timestamp(value: datetime) -> str:
    """Format datetimes as ISO-8601 UTC with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EnvelopeFactory:
    """Builds envelopes stamped with the current time and process uptime."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
    ):
        self.clock = clock
        self.now = now
        self.started_at = clock()

    def uptime(self) -> int:
        return max(0, int(self.clock() - self.started_at))

    def success(self, data: Any, message: str = "Success") -> Envelope:
        return Envelope(
            status="success",
            message=message,
            data=data,
            timestamp=format_timestamp(self.now()),
            uptime=self.uptime(),
        )

    def error(self, message: str, retry_after_ms: Optional[int] = None) -> Envelope:
        return Envelope(
            status="error",
            message=message,
            timestamp=format_timestamp(self.now()),
            uptime=self.uptime(),
            retryAfter=retry_after_ms,
        )
