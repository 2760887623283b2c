"""
Media API caching package.

Holds the in-process TTL cache and the route-aware manager the pipeline
consults before touching an upstream. Entries live only as long as the
process.
"""

from .ttl_cache import TTLCache
from .cache_manager import CacheManager

__all__ = ["TTLCache", "CacheManager"]
