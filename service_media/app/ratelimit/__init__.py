"""
Rate limiting package for the Media API.

Holds the in-process fixed-window limiter and the request-facing helper
that turns a connection into a client identity.
"""

from .fixed_window import FixedWindowRateLimiter, RateLimitMiddleware, RateWindow

__all__ = ["FixedWindowRateLimiter", "RateLimitMiddleware", "RateWindow"]
