"""
Adapters package for the Media API.

Contains HTTP client wrappers for third-party data sources. These adapters
encapsulate:

- Base URLs and request shapes
- Timeout enforcement
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .upstream_client import UpstreamClient
from .jikan_client import JikanClient
from .invidious_client import InvidiousClient

__all__ = [
    "UpstreamClient",
    "JikanClient",
    "InvidiousClient",
]
