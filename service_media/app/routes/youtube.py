"""
Video routes: search through Invidious, download stubs.
"""

from typing import Any, Dict, List

from ..adapters.invidious_client import normalize_video
from ..domain.pipeline import CachePolicy, RequiredParam, RouteContext, RouteDefinition


URL_REQUIRED = RequiredParam("url", "URL parameter is required")


async def search_videos(ctx: RouteContext, params: Dict[str, Any]) -> List[Dict[str, Any]]:
    return await ctx.videos.search(params["q"], params["limit"])


def shape_videos(raw: List[Dict[str, Any]], params: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [normalize_video(video) for video in raw[:params["limit"]]]


def download_info(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "message": "Download functionality requires additional setup",
        "url": params["url"],
        "formats": ["mp4", "mp3", "webm"],
        "note": "Use a dedicated downloader for actual downloading",
    }


def mp4_info(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "message": "MP4 download endpoint",
        "url": params["url"],
        "quality": ["720p", "480p", "360p"],
        "download_link": f"#placeholder_for_{params['url']}",
    }


def mp3_info(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "message": "MP3 download endpoint",
        "url": params["url"],
        "quality": ["128kbps", "192kbps", "320kbps"],
        "download_link": f"#placeholder_for_{params['url']}",
    }


ROUTES = [
    RouteDefinition(
        name="ytsearch",
        method="GET",
        path="/api/ytsearch",
        handler=search_videos,
        normalize=shape_videos,
        message="YouTube search completed",
        required=(RequiredParam("q", 'Query parameter "q" is required'),),
        defaults={"limit": 10},
        integers=("limit",),
        cache=CachePolicy.DEFAULT,
        summary="Search YouTube videos",
    ),
    RouteDefinition(
        name="ytdl",
        method="GET",
        path="/api/ytdl",
        handler=download_info,
        message="YouTube download info",
        required=(URL_REQUIRED,),
    ),
    RouteDefinition(
        name="ytmp4",
        method="GET",
        path="/api/ytmp4",
        handler=mp4_info,
        message="MP4 download info",
        required=(URL_REQUIRED,),
    ),
    RouteDefinition(
        name="ytmp3",
        method="GET",
        path="/api/ytmp3",
        handler=mp3_info,
        message="MP3 download info",
        required=(URL_REQUIRED,),
    ),
]
