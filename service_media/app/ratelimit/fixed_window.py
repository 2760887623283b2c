"""
Fixed-window rate limiter for the Media API.
"""

import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict

from fastapi import Request

from shared.logging import get_logger


DEFAULT_POINTS = 100
DEFAULT_DURATION = 60


@dataclass
class RateWindow:
    """Points consumed by one identity since ``started_at``."""

    count: int
    started_at: float


class FixedWindowRateLimiter:
    """Per-identity request counter that resets at fixed window boundaries."""

    def __init__(
        self,
        points: int = DEFAULT_POINTS,
        duration: float = DEFAULT_DURATION,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.points = points
        self.duration = duration
        self.clock = clock
        self.logger = get_logger("media_api.rate_limiter")
        self._windows: Dict[str, RateWindow] = {}
        self._last_pruned = clock()

    def consume(self, identity: str) -> Dict[str, Any]:
        """Spend one point for ``identity`` and report whether the request may proceed."""
        now = self.clock()
        window = self._windows.get(identity)

        if window is None or now - window.started_at >= self.duration:
            if now - self._last_pruned >= self.duration:
                self.prune()
            window = RateWindow(count=1, started_at=now)
            self._windows[identity] = window
            return self._decision(window, now, allowed=True)

        if window.count >= self.points:
            decision = self._decision(window, now, allowed=False)
            self.logger.warning(
                "Rate limit exceeded",
                client_id=identity,
                current_count=window.count,
                limit=self.points,
                retry_after_ms=decision["retry_after_ms"]
            )
            return decision

        window.count += 1
        return self._decision(window, now, allowed=True)

    def _decision(self, window: RateWindow, now: float, *, allowed: bool) -> Dict[str, Any]:
        remaining_time = max(0.0, window.started_at + self.duration - now)
        result = {
            "allowed": allowed,
            "current_count": window.count,
            "limit": self.points,
            "remaining": max(0, self.points - window.count),
            "reset_in_seconds": int(math.ceil(remaining_time)),
        }
        if not allowed:
            result["retry_after_ms"] = max(1, int(math.ceil(remaining_time * 1000)))
        return result

    def get_rate_limit_status(self, identity: str) -> Dict[str, Any]:
        """Current window for ``identity`` without consuming a point."""
        now = self.clock()
        window = self._windows.get(identity)
        if window is None or now - window.started_at >= self.duration:
            return {
                "current_count": 0,
                "limit": self.points,
                "remaining": self.points,
                "reset_in_seconds": int(self.duration),
            }
        status = self._decision(window, now, allowed=window.count < self.points)
        status.pop("allowed")
        status.pop("retry_after_ms", None)
        return status

    def reset_rate_limit(self, identity: str) -> bool:
        removed = self._windows.pop(identity, None) is not None
        if removed:
            self.logger.info("Rate limit reset", client_id=identity)
        return removed

    def prune(self) -> int:
        """Forget windows that have already elapsed."""
        now = self.clock()
        stale = [key for key, window in self._windows.items() if now - window.started_at >= self.duration]
        for key in stale:
            del self._windows[key]
        self._last_pruned = now
        if stale:
            self.logger.debug("Pruned rate limit windows", removed=len(stale), remaining=len(self._windows))
        return len(stale)

    def get_global_stats(self) -> Dict[str, Any]:
        """Get global rate limiting statistics."""
        self.prune()
        total_clients = len(self._windows)
        total_requests = sum(window.count for window in self._windows.values())
        return {
            "total_clients": total_clients,
            "total_requests": total_requests,
            "average_requests_per_client": total_requests / max(1, total_clients),
        }


class RateLimitMiddleware:
    """Derives a client identity from the request and consults the limiter."""

    def __init__(self, rate_limiter: FixedWindowRateLimiter, *, trust_forwarded_headers: bool = False):
        self.rate_limiter = rate_limiter
        self.trust_forwarded_headers = trust_forwarded_headers
        self.logger = get_logger("media_api.rate_limit_middleware")

    def check_request(self, request: Request) -> Dict[str, Any]:
        """Check rate limit for request."""
        client_id = self._get_client_id(request)
        result = self.rate_limiter.consume(client_id)
        result["client_id"] = client_id
        return result

    def _get_client_id(self, request: Request) -> str:
        """Extract client ID from request."""
        if self.trust_forwarded_headers:
            forwarded_for = request.headers.get('X-Forwarded-For')
            if isinstance(forwarded_for, str) and forwarded_for:
                return forwarded_for.split(',')[0].strip()

            real_ip = request.headers.get('X-Real-IP')
            if isinstance(real_ip, str) and real_ip:
                return real_ip

        return request.client.host if request.client else 'unknown'
