"""
Jikan (MyAnimeList) client and response normalizers.
"""

from typing import Any, Dict, List, Optional

from .upstream_client import UpstreamClient


SYNOPSIS_PREVIEW_CHARS = 200


def _names(items: Optional[List[Dict[str, Any]]]) -> List[str]:
    return [item.get("name") for item in items or [] if item.get("name")]


def _image_url(images: Optional[Dict[str, Any]]) -> Optional[str]:
    return ((images or {}).get("jpg") or {}).get("image_url")


def preview_synopsis(synopsis: Optional[str]) -> Optional[str]:
    """First 200 characters of the synopsis followed by an ellipsis."""
    if not synopsis:
        return None
    return synopsis[:SYNOPSIS_PREVIEW_CHARS] + "..."


def normalize_anime_summary(anime: Dict[str, Any]) -> Dict[str, Any]:
    """Shape used by search results."""
    return {
        "id": anime.get("mal_id"),
        "title": anime.get("title"),
        "title_english": anime.get("title_english"),
        "title_japanese": anime.get("title_japanese"),
        "type": anime.get("type"),
        "episodes": anime.get("episodes"),
        "status": anime.get("status"),
        "year": anime.get("year"),
        "score": anime.get("score"),
        "rank": anime.get("rank"),
        "synopsis": preview_synopsis(anime.get("synopsis")),
        "image": _image_url(anime.get("images")),
        "url": anime.get("url"),
    }


def normalize_anime_detail(anime: Dict[str, Any]) -> Dict[str, Any]:
    """Full record returned by the info route."""
    return {
        "id": anime.get("mal_id"),
        "title": anime.get("title"),
        "title_english": anime.get("title_english"),
        "title_japanese": anime.get("title_japanese"),
        "type": anime.get("type"),
        "episodes": anime.get("episodes"),
        "status": anime.get("status"),
        "aired": (anime.get("aired") or {}).get("string"),
        "premiered": anime.get("premiered"),
        "broadcast": (anime.get("broadcast") or {}).get("string"),
        "year": anime.get("year"),
        "season": anime.get("season"),
        "score": anime.get("score"),
        "scored_by": anime.get("scored_by"),
        "rank": anime.get("rank"),
        "popularity": anime.get("popularity"),
        "members": anime.get("members"),
        "favorites": anime.get("favorites"),
        "synopsis": anime.get("synopsis"),
        "background": anime.get("background"),
        "genres": _names(anime.get("genres")),
        "themes": _names(anime.get("themes")),
        "demographics": _names(anime.get("demographics")),
        "studios": _names(anime.get("studios")),
        "image": _image_url(anime.get("images")),
        "trailer": (anime.get("trailer") or {}).get("url"),
        "url": anime.get("url"),
    }


def normalize_random_anime(anime: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": anime.get("mal_id"),
        "title": anime.get("title"),
        "type": anime.get("type"),
        "episodes": anime.get("episodes"),
        "score": anime.get("score"),
        "rank": anime.get("rank"),
        "synopsis": preview_synopsis(anime.get("synopsis")),
        "image": _image_url(anime.get("images")),
        "url": anime.get("url"),
    }


def normalize_episode(episode: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "episode_id": episode.get("mal_id"),
        "title": episode.get("title"),
        "title_japanese": episode.get("title_japanese"),
        "aired": episode.get("aired"),
        "score": episode.get("score"),
        "filler": episode.get("filler"),
        "recap": episode.get("recap"),
        "forum_url": episode.get("forum_url"),
    }


def normalize_character(entry: Dict[str, Any]) -> Dict[str, Any]:
    character = entry.get("character") or {}
    return {
        "character": {
            "id": character.get("mal_id"),
            "name": character.get("name"),
            "image": _image_url(character.get("images")),
        },
        "role": entry.get("role"),
        "voice_actors": [
            {
                "person": {
                    "id": (actor.get("person") or {}).get("mal_id"),
                    "name": (actor.get("person") or {}).get("name"),
                },
                "language": actor.get("language"),
            }
            for actor in entry.get("voice_actors") or []
        ],
    }


class JikanClient:
    """Thin wrapper over the Jikan v4 REST API."""

    def __init__(self, upstream: UpstreamClient):
        self.upstream = upstream

    async def search_anime(self, query: str, limit: int) -> List[Dict[str, Any]]:
        payload = await self.upstream.fetch("/anime", params={"q": query, "limit": limit})
        return list((payload or {}).get("data") or [])

    async def get_anime(self, anime_id: int) -> Dict[str, Any]:
        payload = await self.upstream.fetch(f"/anime/{anime_id}")
        return (payload or {}).get("data") or {}

    async def get_episodes(self, anime_id: int, page: int = 1) -> Dict[str, Any]:
        return await self.upstream.fetch(f"/anime/{anime_id}/episodes", params={"page": page}) or {}

    async def get_characters(self, anime_id: int) -> List[Dict[str, Any]]:
        payload = await self.upstream.fetch(f"/anime/{anime_id}/characters")
        return list((payload or {}).get("data") or [])

    async def get_random_anime(self) -> Dict[str, Any]:
        payload = await self.upstream.fetch("/random/anime")
        return (payload or {}).get("data") or {}
