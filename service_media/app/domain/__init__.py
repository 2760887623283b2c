"""
Domain package for the Media API.

Holds the request pipeline that every catalog route runs through.
"""

from .pipeline import (
    CACHE_HIT_MESSAGE,
    CachePolicy,
    RequiredParam,
    RouteContext,
    RouteDefinition,
    RoutePipeline,
)

__all__ = [
    "CACHE_HIT_MESSAGE",
    "CachePolicy",
    "RequiredParam",
    "RouteContext",
    "RouteDefinition",
    "RoutePipeline",
]
