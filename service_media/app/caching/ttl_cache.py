"""
In-process TTL cache for upstream responses.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from shared.logging import get_logger


DEFAULT_TTL = 600

_MISSING = object()


class TTLCache:
    """Key/value store where every entry carries its own expiry."""

    def __init__(self, default_ttl: float = DEFAULT_TTL, *, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self.clock = clock
        self.logger = get_logger("media_api.cache")
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or ``default`` when absent or expired."""
        entry = self._entries.get(key, _MISSING)
        if entry is _MISSING:
            return default

        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return default
        return value

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``; the last writer wins."""
        cache_ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (self.clock() + cache_ttl, value)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        self._entries.clear()

    def ttl(self, key: str) -> Optional[float]:
        """Seconds left before ``key`` expires, or None when absent."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        remaining = entry[0] - self.clock()
        return remaining if remaining > 0 else None

    def sweep(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self.clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            self.logger.debug("Swept expired cache entries", removed=len(expired))
        return len(expired)

    def keys(self) -> List[str]:
        """Live (unexpired) keys."""
        now = self.clock()
        return [key for key, (expires_at, _) in self._entries.items() if now < expires_at]

    def __len__(self) -> int:
        return len(self.keys())
