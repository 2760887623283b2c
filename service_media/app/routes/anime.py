"""
Anime routes backed by the Jikan API.
"""

from typing import Any, Dict, List

from ..adapters.jikan_client import (
    normalize_anime_detail,
    normalize_anime_summary,
    normalize_character,
    normalize_episode,
    normalize_random_anime,
)
from ..domain.pipeline import CachePolicy, RequiredParam, RouteContext, RouteDefinition


ANIME_ID_REQUIRED = RequiredParam("id", "Anime ID parameter is required")


async def search_anime(ctx: RouteContext, params: Dict[str, Any]) -> List[Dict[str, Any]]:
    return await ctx.anime.search_anime(params["q"], params["limit"])


def shape_search(raw: List[Dict[str, Any]], params: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [normalize_anime_summary(anime) for anime in raw[:params["limit"]]]


async def anime_info(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return await ctx.anime.get_anime(params["id"])


def shape_info(raw: Dict[str, Any], params: Dict[str, Any]) -> Dict[str, Any]:
    return normalize_anime_detail(raw)


async def anime_episodes(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return await ctx.anime.get_episodes(params["id"], params["page"])


def shape_episodes(raw: Dict[str, Any], params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "anime_id": params["id"],
        "episodes": [normalize_episode(episode) for episode in raw.get("data") or []],
        "pagination": raw.get("pagination"),
    }


async def anime_characters(ctx: RouteContext, params: Dict[str, Any]) -> List[Dict[str, Any]]:
    return await ctx.anime.get_characters(params["id"])


def shape_characters(raw: List[Dict[str, Any]], params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "anime_id": params["id"],
        "characters": [normalize_character(entry) for entry in raw],
    }


async def random_anime(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return await ctx.anime.get_random_anime()


def shape_random(raw: Dict[str, Any], params: Dict[str, Any]) -> Dict[str, Any]:
    return normalize_random_anime(raw)


ROUTES = [
    RouteDefinition(
        name="anime_search",
        method="GET",
        path="/api/anime/search",
        handler=search_anime,
        normalize=shape_search,
        message="Anime search completed",
        required=(RequiredParam("q", 'Query parameter "q" is required'),),
        defaults={"limit": 10},
        integers=("limit",),
        cache=CachePolicy.DEFAULT,
        summary="Search anime by title",
    ),
    RouteDefinition(
        name="anime_info",
        method="GET",
        path="/api/anime/info",
        handler=anime_info,
        normalize=shape_info,
        message="Anime info retrieved",
        required=(ANIME_ID_REQUIRED,),
        integers=("id",),
        cache=CachePolicy.DEFAULT,
        summary="Detailed record for one anime",
    ),
    RouteDefinition(
        name="anime_episodes",
        method="GET",
        path="/api/anime/episodes",
        handler=anime_episodes,
        normalize=shape_episodes,
        message="Anime episodes retrieved",
        required=(ANIME_ID_REQUIRED,),
        defaults={"page": 1},
        integers=("id", "page"),
        cache=CachePolicy.DEFAULT,
        summary="Episode list for one anime",
    ),
    RouteDefinition(
        name="anime_characters",
        method="GET",
        path="/api/anime/characters",
        handler=anime_characters,
        normalize=shape_characters,
        message="Anime characters retrieved",
        required=(ANIME_ID_REQUIRED,),
        integers=("id",),
        cache=CachePolicy.DEFAULT,
        summary="Characters and voice actors for one anime",
    ),
    RouteDefinition(
        name="anime_random",
        method="GET",
        path="/api/anime/random",
        handler=random_anime,
        normalize=shape_random,
        message="Random anime retrieved",
        cache=CachePolicy.SHORT,
        summary="One random anime",
    ),
]
