"""
Route catalog for the Media API.

Each module declares its endpoints as ``RouteDefinition`` objects; the
service registers them all through one generic pipeline endpoint.
"""

from dataclasses import replace
from typing import List

from ..domain.pipeline import RouteDefinition
from . import ai, anime, entertainment, files, image, social, text, utility, youtube


def _tagged(routes: List[RouteDefinition], tag: str) -> List[RouteDefinition]:
    return [replace(route, tags=route.tags or (tag,)) for route in routes]


ALL_ROUTES: List[RouteDefinition] = [
    *_tagged(youtube.ROUTES, "youtube"),
    *_tagged(anime.ROUTES, "anime"),
    *_tagged(ai.ROUTES, "ai"),
    *_tagged(image.ROUTES, "image"),
    *_tagged(utility.ROUTES, "utility"),
    *_tagged(social.ROUTES, "social"),
    *_tagged(text.ROUTES, "text"),
    *_tagged(files.ROUTES, "files"),
    *_tagged(entertainment.ROUTES, "entertainment"),
]

__all__ = ["ALL_ROUTES"]
