"""
Unit tests for the route pipeline.
"""

import random
from unittest.mock import AsyncMock

import pytest

from service_media.app.caching.cache_manager import CacheManager
from service_media.app.caching.ttl_cache import TTLCache
from service_media.app.domain.pipeline import (
    CACHE_HIT_MESSAGE,
    CachePolicy,
    RequiredParam,
    RouteContext,
    RouteDefinition,
    RoutePipeline,
)
from shared.envelope import EnvelopeFactory
from shared.errors import UpstreamError, ValidationError
from shared.test_helpers import FakeClock


def echo(ctx, params):
    return dict(params)


SEARCH = RouteDefinition(
    name="search",
    method="GET",
    path="/api/search",
    handler=echo,
    message="Search completed",
    required=(RequiredParam("q", 'Query parameter "q" is required'),),
    defaults={"limit": 10},
    integers=("limit",),
    cache=CachePolicy.DEFAULT,
)


class TestRouteValidation:
    """Test cases for parameter validation."""

    @pytest.fixture
    def pipeline(self):
        return RoutePipeline(RouteContext(), CacheManager(TTLCache()), EnvelopeFactory())

    @pytest.mark.parametrize("raw", [{}, {"q": None}, {"q": ""}, {"q": "   "}])
    def test_missing_required_param(self, pipeline, raw):
        """Test absent, null, empty and blank values all count as missing."""
        with pytest.raises(ValidationError) as exc_info:
            pipeline.validate(SEARCH, raw)

        assert exc_info.value.message == 'Query parameter "q" is required'
        assert exc_info.value.status_code == 400

    def test_defaults_filled_and_undeclared_dropped(self, pipeline):
        """Test effective parameters contain only declared names with defaults."""
        params = pipeline.validate(SEARCH, {"q": "naruto", "utm_source": "mail"})

        assert params == {"q": "naruto", "limit": 10}

    def test_integer_params_are_coerced(self, pipeline):
        """Test query-string integers become ints."""
        assert pipeline.validate(SEARCH, {"q": "naruto", "limit": "3"})["limit"] == 3

    @pytest.mark.parametrize("limit", ["abc", "0", "-2", "1.5", True])
    def test_malformed_integer_rejected(self, pipeline, limit):
        """Test non-positive or non-numeric integers are a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            pipeline.validate(SEARCH, {"q": "naruto", "limit": limit})

        assert exc_info.value.message == 'Parameter "limit" must be a positive integer'

    def test_non_string_value_rejected(self, pipeline):
        """Test JSON bodies cannot smuggle objects into string parameters."""
        with pytest.raises(ValidationError) as exc_info:
            pipeline.validate(SEARCH, {"q": {"$ne": ""}})

        assert exc_info.value.message == 'Parameter "q" must be a string'


class TestRoutePipeline:
    """Test cases for RoutePipeline.execute."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache_manager(self, clock):
        return CacheManager(TTLCache(600, clock=clock))

    @pytest.fixture
    def pipeline(self, cache_manager, clock):
        return RoutePipeline(
            RouteContext(rng=random.Random(1)),
            cache_manager,
            EnvelopeFactory(clock=clock),
            short_ttl=300,
        )

    @pytest.mark.asyncio
    async def test_success(self, pipeline):
        """Test a fresh request reports the route message."""
        status, envelope = await pipeline.execute(SEARCH, {"q": "naruto"})

        assert status == 200
        assert envelope.status == "success"
        assert envelope.message == "Search completed"
        assert envelope.data == {"q": "naruto", "limit": 10}

    @pytest.mark.asyncio
    async def test_second_identical_request_is_served_from_cache(self, pipeline):
        """Test identical effective parameters hit the cache."""
        handler = AsyncMock(return_value=[{"id": 1}])
        definition = RouteDefinition(
            name="cached",
            method="GET",
            path="/api/cached",
            handler=handler,
            message="Fetched",
            required=(RequiredParam("q", "q required"),),
            cache=CachePolicy.DEFAULT,
        )

        _, first = await pipeline.execute(definition, {"q": "naruto"})
        _, second = await pipeline.execute(definition, {"q": "naruto", "ignored": "x"})

        assert first.message == "Fetched"
        assert second.message == CACHE_HIT_MESSAGE
        assert second.data == first.data
        handler.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_short_policy_uses_short_ttl(self, pipeline, cache_manager, clock):
        """Test short-lived routes expire before the default TTL."""
        handler = AsyncMock(side_effect=[{"id": 1}, {"id": 2}])
        definition = RouteDefinition(
            name="random",
            method="GET",
            path="/api/random",
            handler=handler,
            message="Random",
            cache=CachePolicy.SHORT,
        )

        await pipeline.execute(definition, {})
        clock.advance(299)
        _, cached = await pipeline.execute(definition, {})
        clock.advance(2)
        _, fresh = await pipeline.execute(definition, {})

        assert cached.data == {"id": 1}
        assert fresh.data == {"id": 2}
        assert fresh.message == "Random"

    @pytest.mark.asyncio
    async def test_normalizer_output_is_cached(self, pipeline, cache_manager):
        """Test the normalized shape, not the raw payload, is stored."""
        definition = RouteDefinition(
            name="shaped",
            method="GET",
            path="/api/shaped",
            handler=lambda ctx, params: {"raw": True, "value": 5},
            normalize=lambda raw, params: {"value": raw["value"]},
            message="Shaped",
            cache=CachePolicy.DEFAULT,
        )

        _, envelope = await pipeline.execute(definition, {})

        assert envelope.data == {"value": 5}
        assert cache_manager.lookup("shaped", {}) == (True, {"value": 5})

    @pytest.mark.asyncio
    async def test_placeholder_routes_skip_cache(self, pipeline, cache_manager):
        """Test uncached routes never populate the cache."""
        definition = RouteDefinition(
            name="placeholder",
            method="GET",
            path="/api/placeholder",
            handler=lambda ctx, params: {"value": ctx.rng.random()},
            message="Placeholder",
        )

        _, first = await pipeline.execute(definition, {})
        _, second = await pipeline.execute(definition, {})

        assert first.data != second.data
        assert cache_manager.size() == 0

    @pytest.mark.asyncio
    async def test_validation_error_envelope(self, pipeline):
        """Test a missing parameter yields a 400 error envelope."""
        status, envelope = await pipeline.execute(SEARCH, {})

        assert status == 400
        assert envelope.status == "error"
        assert envelope.message == 'Query parameter "q" is required'

    @pytest.mark.asyncio
    async def test_upstream_error_envelope_is_not_cached(self, pipeline, cache_manager):
        """Test upstream failures become 500 envelopes and leave the cache empty."""
        definition = RouteDefinition(
            name="upstream",
            method="GET",
            path="/api/upstream",
            handler=AsyncMock(side_effect=UpstreamError("Request failed: timeout of 30000ms exceeded")),
            message="Never",
            cache=CachePolicy.DEFAULT,
        )

        status, envelope = await pipeline.execute(definition, {})

        assert status == 500
        assert envelope.message == "Request failed: timeout of 30000ms exceeded"
        assert cache_manager.size() == 0

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, pipeline):
        """Test handler crashes become a generic 500 envelope."""

        def crash(ctx, params):
            raise KeyError("boom")

        definition = RouteDefinition(
            name="crash",
            method="GET",
            path="/api/crash",
            handler=crash,
            message="Never",
        )

        status, envelope = await pipeline.execute(definition, {})

        assert status == 500
        assert envelope.message == "Internal server error"
