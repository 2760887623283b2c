"""
Route-aware cache manager for the Media API.
"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TYPE_CHECKING

from shared.logging import get_logger
from .ttl_cache import TTLCache, DEFAULT_TTL

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_RANDOM_TTL = 300
DEFAULT_CHECK_PERIOD = 120

_MISS = object()


class CacheManager:
    """Builds route-scoped keys and records hit/miss telemetry around a TTLCache."""

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        *,
        metrics: Optional["MetricsCollector"] = None,
        check_period: float = DEFAULT_CHECK_PERIOD,
    ):
        self.cache = cache if cache is not None else TTLCache(DEFAULT_TTL)
        self.metrics = metrics
        self.check_period = check_period
        self.logger = get_logger("media_api.cache_manager")
        self._sweeper: Optional[asyncio.Task] = None
        self._sweep_hooks: List[Callable[[], Any]] = []

    @staticmethod
    def make_key(route: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Compose ``<route>:<canonical params>`` so routes never share keys."""
        canonical = json.dumps(
            dict(params or {}),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
        return f"{route}:{canonical}"

    def lookup(self, route: str, params: Optional[Mapping[str, Any]] = None) -> Tuple[bool, Any]:
        """Return ``(hit, value)`` for the route and parameters."""
        key = self.make_key(route, params)
        value = self.cache.get(key, _MISS)

        if value is _MISS:
            self._record("cache_misses_total", route)
            self.logger.debug("Cache miss", route=route, key=key)
            return False, None

        self._record("cache_hits_total", route)
        self.logger.debug("Cache hit", route=route, key=key)
        return True, value

    def store(
        self,
        route: str,
        params: Optional[Mapping[str, Any]],
        value: Any,
        ttl: Optional[float] = None,
    ) -> str:
        """Cache ``value`` for the route and parameters, returning the key used."""
        key = self.make_key(route, params)
        self.cache.set(key, value, ttl=ttl)
        self.logger.debug("Cached value", route=route, key=key, ttl=ttl or self.cache.default_ttl)
        self._update_size_gauge()
        return key

    def size(self) -> int:
        return len(self.cache)

    def get_stats(self) -> Dict[str, Any]:
        """Summarize cache contents."""
        return {
            "entries": self.size(),
            "default_ttl_seconds": self.cache.default_ttl,
            "check_period_seconds": self.check_period,
            "sweeper_running": self._sweeper is not None and not self._sweeper.done(),
        }

    def on_sweep(self, hook: Callable[[], Any]) -> None:
        """Run ``hook`` after every periodic sweep."""
        self._sweep_hooks.append(hook)

    def sweep(self) -> int:
        removed = self.cache.sweep()
        self._update_size_gauge()
        for hook in self._sweep_hooks:
            hook()
        return removed

    async def start_sweeper(self) -> None:
        """Start the periodic expired-entry sweep on the running loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.create_task(self._sweep_forever())
        self.logger.info("Cache sweeper started", check_period=self.check_period)

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        self.logger.info("Cache sweeper stopped")

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.check_period)
            self.sweep()

    def _record(self, metric_name: str, route: str) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, route=route)

    def _update_size_gauge(self) -> None:
        if self.metrics:
            self.metrics.set_gauge("cache_entries", self.size())
