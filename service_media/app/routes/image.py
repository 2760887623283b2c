"""
Image utility routes. Output URLs point at placeholder image services.
"""

from typing import Any, Dict
from urllib.parse import quote

from ..domain.pipeline import RequiredParam, RouteContext, RouteDefinition


IMAGE_URL_REQUIRED = RequiredParam("url", "Image URL is required")

FILTERS = ["grayscale", "sepia", "blur", "brightness", "contrast", "vintage"]


def lyrics_image(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": params["title"],
        "artist": params["artist"] or "Unknown Artist",
        "image_url": "https://picsum.photos/800/600?text=Lyrics",
        "lyrics": "Demo lyrics content would appear here...",
    }


def remove_background(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "message": "Background removal demo endpoint",
        "processed_url": "https://picsum.photos/400/400?text=No+Background",
        "original_size": "1920x1080",
        "processed_size": "400x400",
    }


def resize(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    width, height = params["width"], params["height"]
    return {
        "original_url": params["url"],
        "resized_url": f"https://picsum.photos/{width}/{height}",
        "dimensions": {"width": width, "height": height},
        "format": "demo",
    }


def apply_filter(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    applied = params["filter"]
    return {
        "original_url": params["url"],
        "available_filters": list(FILTERS),
        "applied_filter": applied,
        "filtered_url": f"https://picsum.photos/500/500?text={quote(applied)}+Filter",
    }


def meme(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    text = params["text"]
    parts = text.split(",")
    return {
        "template": params["template"],
        "text": text,
        "meme_url": f"https://picsum.photos/500/500?text={quote(text, safe='')}",
        "top_text": parts[0] or text,
        "bottom_text": parts[1] if len(parts) > 1 else "",
    }


ROUTES = [
    RouteDefinition(
        name="image_lyrics",
        method="GET",
        path="/api/image/lyrics",
        handler=lyrics_image,
        message="Lyrics image generated",
        required=(RequiredParam("title", "Song title is required"),),
        defaults={"artist": None},
    ),
    RouteDefinition(
        name="image_bgremove",
        method="POST",
        path="/api/image/bgremove",
        handler=remove_background,
        message="Background removal demo",
    ),
    RouteDefinition(
        name="image_resize",
        method="GET",
        path="/api/image/resize",
        handler=resize,
        message="Image resize demo",
        required=(IMAGE_URL_REQUIRED,),
        defaults={"width": 500, "height": 500},
        integers=("width", "height"),
    ),
    RouteDefinition(
        name="image_filters",
        method="GET",
        path="/api/image/filters",
        handler=apply_filter,
        message="Image filter applied",
        required=(IMAGE_URL_REQUIRED,),
        defaults={"filter": "grayscale"},
    ),
    RouteDefinition(
        name="image_meme",
        method="GET",
        path="/api/image/meme",
        handler=meme,
        message="Meme generated",
        required=(RequiredParam("text", "Text is required"),),
        defaults={"template": "drake"},
    ),
]
