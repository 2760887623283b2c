"""
Invidious client used for YouTube search.
"""

from typing import Any, Dict, List

from .upstream_client import UpstreamClient


def normalize_video(video: Dict[str, Any]) -> Dict[str, Any]:
    video_id = video.get("videoId")
    thumbnails = video.get("videoThumbnails") or []
    return {
        "id": video_id,
        "title": video.get("title"),
        "channel": video.get("author"),
        "duration": video.get("lengthSeconds"),
        "views": video.get("viewCount"),
        "thumbnail": thumbnails[0].get("url") if thumbnails else None,
        "url": f"https://www.youtube.com/watch?v={video_id}" if video_id else None,
        "uploaded": video.get("publishedText"),
    }


class InvidiousClient:
    """Searches videos through a public Invidious instance."""

    def __init__(self, upstream: UpstreamClient):
        self.upstream = upstream

    async def search(self, query: str, limit: int) -> List[Dict[str, Any]]:
        payload = await self.upstream.fetch("/api/v1/search", params={"q": query, "limit": limit})
        if not isinstance(payload, list):
            return []
        # Search results mix channels and playlists in with videos.
        return [item for item in payload if item.get("type", "video") == "video"]
