"""
Unit tests for the route-aware cache manager.
"""

import asyncio

import pytest

from service_media.app.caching.cache_manager import CacheManager
from service_media.app.caching.ttl_cache import TTLCache
from shared.test_helpers import FakeClock


class DummyMetrics:
    """Minimal metrics collector stub."""

    def __init__(self):
        self.counters = []
        self.gauges = []

    def increment_counter(self, metric_name: str, **labels):
        self.counters.append((metric_name, labels))

    def set_gauge(self, metric_name: str, value: float, **labels):
        self.gauges.append((metric_name, value))


class TestCacheManager:
    """Test cases for CacheManager."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def metrics(self):
        return DummyMetrics()

    @pytest.fixture
    def cache_manager(self, clock, metrics):
        """Create CacheManager backed by a fake-clock cache."""
        return CacheManager(TTLCache(600, clock=clock), metrics=metrics, check_period=120)

    def test_make_key_is_order_independent(self):
        """Test identical effective parameters produce identical keys."""
        first = CacheManager.make_key("anime_search", {"q": "naruto", "limit": 3})
        second = CacheManager.make_key("anime_search", {"limit": 3, "q": "naruto"})

        assert first == second
        assert first == 'anime_search:{"limit":3,"q":"naruto"}'

    def test_make_key_namespaces_routes(self):
        """Test two routes never share a key for the same parameters."""
        params = {"q": "naruto", "limit": 10}
        assert CacheManager.make_key("anime_search", params) != CacheManager.make_key("ytsearch", params)

    def test_make_key_without_params(self):
        """Test parameterless routes still get a stable key."""
        assert CacheManager.make_key("anime_random") == "anime_random:{}"

    def test_lookup_miss_then_hit(self, cache_manager, metrics):
        """Test lookup reports a miss before store and a hit after."""
        params = {"q": "naruto", "limit": 3}

        assert cache_manager.lookup("anime_search", params) == (False, None)

        cache_manager.store("anime_search", params, [{"id": 20}])
        assert cache_manager.lookup("anime_search", params) == (True, [{"id": 20}])

        recorded = [name for name, _ in metrics.counters]
        assert recorded == ["cache_misses_total", "cache_hits_total"]
        assert metrics.counters[0][1] == {"route": "anime_search"}

    def test_store_with_short_ttl(self, cache_manager, clock):
        """Test an explicit TTL expires sooner than the default."""
        cache_manager.store("anime_random", {}, {"id": 1}, ttl=300)
        cache_manager.store("anime_info", {"id": 1}, {"id": 1})

        clock.advance(301)

        assert cache_manager.lookup("anime_random", {})[0] is False
        assert cache_manager.lookup("anime_info", {"id": 1})[0] is True

    def test_store_updates_size_gauge(self, cache_manager, metrics):
        """Test the entry gauge follows writes."""
        cache_manager.store("a", {}, 1)
        cache_manager.store("b", {}, 2)

        assert metrics.gauges[-1] == ("cache_entries", 2)
        assert cache_manager.size() == 2

    def test_sweep_and_stats(self, cache_manager, clock):
        """Test sweep drops expired entries and stats reflect the result."""
        cache_manager.store("a", {}, 1, ttl=10)
        cache_manager.store("b", {}, 2)
        clock.advance(20)

        assert cache_manager.sweep() == 1

        stats = cache_manager.get_stats()
        assert stats["entries"] == 1
        assert stats["default_ttl_seconds"] == 600
        assert stats["check_period_seconds"] == 120
        assert stats["sweeper_running"] is False

    def test_sweep_runs_hooks(self, cache_manager):
        """Test registered hooks run after every sweep."""
        calls = []
        cache_manager.on_sweep(lambda: calls.append("pruned"))

        cache_manager.sweep()
        cache_manager.sweep()

        assert calls == ["pruned", "pruned"]

    @pytest.mark.asyncio
    async def test_sweeper_lifecycle(self, clock):
        """Test the background sweeper runs periodically and stops cleanly."""
        cache_manager = CacheManager(TTLCache(600, clock=clock), check_period=0.01)
        cache_manager.store("a", {}, 1, ttl=1)
        clock.advance(5)

        await cache_manager.start_sweeper()
        assert cache_manager.get_stats()["sweeper_running"] is True

        await asyncio.sleep(0.05)
        assert len(cache_manager.cache._entries) == 0

        await cache_manager.stop_sweeper()
        assert cache_manager.get_stats()["sweeper_running"] is False

    @pytest.mark.asyncio
    async def test_start_sweeper_is_idempotent(self, cache_manager):
        """Test starting twice keeps a single task."""
        await cache_manager.start_sweeper()
        task = cache_manager._sweeper
        await cache_manager.start_sweeper()

        assert cache_manager._sweeper is task
        await cache_manager.stop_sweeper()
