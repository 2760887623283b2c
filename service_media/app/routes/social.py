"""
Social profile routes.

Counts are drawn fresh on every call, even for the same username, and these
routes are never cached.
"""

from typing import Any, Dict

from ..domain.pipeline import RequiredParam, RouteContext, RouteDefinition


USERNAME_REQUIRED = RequiredParam("username", "Username is required")
PROFILE_PIC = "https://picsum.photos/150/150"


def instagram(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    rng = ctx.rng
    return {
        "username": params["username"],
        "full_name": "Demo User",
        "bio": "This is a demo bio for Instagram profile",
        "followers": rng.randrange(100000),
        "following": rng.randrange(1000),
        "posts": rng.randrange(100),
        "is_verified": rng.random() > 0.5,
        "profile_pic": PROFILE_PIC,
        "is_private": False,
    }


def tiktok(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    rng = ctx.rng
    return {
        "username": params["username"],
        "display_name": "Demo TikTok User",
        "bio": "Demo TikTok bio 🎵",
        "followers": rng.randrange(1000000),
        "following": rng.randrange(100),
        "likes": rng.randrange(10000000),
        "videos": rng.randrange(100),
        "is_verified": rng.random() > 0.7,
        "profile_pic": PROFILE_PIC,
    }


def twitter(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    rng = ctx.rng
    return {
        "username": params["username"],
        "display_name": "Demo Twitter User",
        "bio": "This is a demo Twitter bio. #Demo #API",
        "followers": rng.randrange(50000),
        "following": rng.randrange(1000),
        "tweets": rng.randrange(10000),
        "likes": rng.randrange(50000),
        "is_verified": rng.random() > 0.6,
        "profile_pic": PROFILE_PIC,
        "location": "Demo City",
        "website": "demo-website.com",
    }


ROUTES = [
    RouteDefinition(
        name="social_instagram",
        method="GET",
        path="/api/social/instagram",
        handler=instagram,
        message="Instagram profile info retrieved",
        required=(USERNAME_REQUIRED,),
    ),
    RouteDefinition(
        name="social_tiktok",
        method="GET",
        path="/api/social/tiktok",
        handler=tiktok,
        message="TikTok profile info retrieved",
        required=(USERNAME_REQUIRED,),
    ),
    RouteDefinition(
        name="social_twitter",
        method="GET",
        path="/api/social/twitter",
        handler=twitter,
        message="Twitter profile info retrieved",
        required=(USERNAME_REQUIRED,),
    ),
]
