"""
Route tests for upstream-backed endpoints with faked Jikan and Invidious transports.
"""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from service_media.app.main import MediaApiService
from shared.config import get_config
from shared.test_helpers import MediaDataFactory, MediaTestEnvironment, json_transport


def build_client_service(jikan_routes=None, invidious_routes=None, calls=None, settings=None, **kwargs):
    overrides = MediaTestEnvironment.get_mock_config()
    overrides.update(settings or {})
    return MediaApiService(
        get_config("media_api", **overrides),
        jikan_transport=json_transport(jikan_routes or {}, calls=calls),
        invidious_transport=json_transport(invidious_routes or {}, calls=calls),
        **kwargs,
    )


class TestAnimeRoutes:
    """Test cases for the anime endpoints."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def service(self, calls):
        return build_client_service(
            jikan_routes={
                "/v4/anime": MediaDataFactory.create_anime_search_payload(5),
                "/v4/anime/20": {"data": MediaDataFactory.create_anime()},
                "/v4/anime/20/episodes": MediaDataFactory.create_episodes_payload(3, page=2),
                "/v4/anime/20/characters": MediaDataFactory.create_characters_payload(),
                "/v4/random/anime": {"data": MediaDataFactory.create_anime(mal_id=1, title="Cowboy Bebop")},
                "/v4/anime/404": 404,
            },
            calls=calls,
        )

    @pytest.fixture
    def client(self, service):
        with TestClient(service.app) as client:
            yield client

    def test_search_respects_limit(self, client, calls):
        """Test search returns at most ``limit`` normalized records."""
        response = client.get("/api/anime/search", params={"q": "naruto", "limit": "3"})

        assert response.status_code == 200
        payload = response.json()
        assert payload["message"] == "Anime search completed"
        assert len(payload["data"]) <= 3
        for anime in payload["data"]:
            assert {"id", "title", "image"} <= set(anime)
        assert calls[0].params == {"q": "naruto", "limit": "3"}

    def test_search_served_from_cache(self, client, calls):
        """Test the second identical request is a cache hit with the same data."""
        first = client.get("/api/anime/search", params={"q": "naruto", "limit": "3"}).json()
        second = client.get("/api/anime/search", params={"limit": "3", "q": "naruto"}).json()

        assert second["message"] == "Data from cache"
        assert second["data"] == first["data"]
        assert len(calls) == 1

    def test_search_default_limit_shares_cache_entry(self, client, calls):
        """Test omitting the default and passing it explicitly hit the same entry."""
        client.get("/api/anime/search", params={"q": "naruto"})
        response = client.get("/api/anime/search", params={"q": "naruto", "limit": "10"})

        assert response.json()["message"] == "Data from cache"
        assert len(calls) == 1

    def test_info(self, client):
        """Test the detail record."""
        response = client.get("/api/anime/info", params={"id": "20"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == 20
        assert data["studios"] == ["Pierrot"]
        assert data["premiered"] == "Fall 2002"

    def test_info_requires_numeric_id(self, client, calls):
        """Test a non-numeric id never reaches the upstream."""
        response = client.get("/api/anime/info", params={"id": "naruto"})

        assert response.status_code == 400
        assert response.json()["message"] == 'Parameter "id" must be a positive integer'
        assert calls == []

    def test_info_upstream_not_found(self, client):
        """Test upstream errors become 500 envelopes."""
        response = client.get("/api/anime/info", params={"id": "404"})

        assert response.status_code == 500
        payload = response.json()
        assert payload["status"] == "error"
        assert payload["message"] == "Request failed: upstream responded with status code 404"

    def test_episodes(self, client, calls):
        """Test episodes are wrapped with the anime id and pagination."""
        response = client.get("/api/anime/episodes", params={"id": "20", "page": "2"})

        data = response.json()["data"]
        assert data["anime_id"] == 20
        assert len(data["episodes"]) == 3
        assert data["episodes"][0]["episode_id"] == 1
        assert data["pagination"]["last_visible_page"] == 2
        assert calls[0].params == {"page": "2"}

    def test_characters(self, client):
        """Test characters are wrapped with the anime id."""
        response = client.get("/api/anime/characters", params={"id": "20"})

        data = response.json()["data"]
        assert data["anime_id"] == 20
        assert data["characters"][0]["character"]["name"] == "Uzumaki, Naruto"

    def test_random_cached_briefly(self, client, service, calls):
        """Test the random route is cached under the short TTL."""
        first = client.get("/api/anime/random").json()
        second = client.get("/api/anime/random").json()

        assert first["data"]["title"] == "Cowboy Bebop"
        assert second["message"] == "Data from cache"
        assert len(calls) == 1

        key = service.cache_manager.make_key("anime_random", {})
        assert service.cache_manager.cache.ttl(key) <= 300


class TestVideoSearchRoute:
    """Test cases for /api/ytsearch."""

    @pytest.fixture
    def client(self):
        service = build_client_service(
            invidious_routes={"/api/v1/search": MediaDataFactory.create_video_search_payload(5)},
        )
        with TestClient(service.app) as client:
            yield client

    def test_search_limit_and_shape(self, client):
        """Test only videos are returned, at most ``limit`` of them."""
        response = client.get("/api/ytsearch", params={"q": "naruto opening", "limit": "2"})

        assert response.status_code == 200
        payload = response.json()
        assert payload["message"] == "YouTube search completed"
        assert len(payload["data"]) == 2
        assert payload["data"][0]["url"].startswith("https://www.youtube.com/watch?v=")

    def test_download_stub(self, client):
        """Test download placeholders echo the URL."""
        response = client.get("/api/ytmp3", params={"url": "https://youtu.be/abc"})

        assert response.status_code == 200
        assert response.json()["data"]["url"] == "https://youtu.be/abc"


class TestUpstreamTimeout:
    """Test cases for slow upstreams."""

    def test_timeout_surfaces_as_500(self):
        """Test a stalled upstream fails within the configured bound."""

        async def stall(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        service = MediaApiService(
            get_config("media_api", **{**MediaTestEnvironment.get_mock_config(), "upstream_timeout_seconds": 0.05}),
            jikan_transport=httpx.MockTransport(stall),
        )

        with TestClient(service.app) as client:
            response = client.get("/api/anime/random")

        assert response.status_code == 500
        assert response.json()["message"] == "Request failed: timeout of 50ms exceeded"
        assert service.cache_manager.size() == 0
