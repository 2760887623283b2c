"""
Entertainment routes: jokes, quotes, news.
"""

from typing import Any, Dict

from shared.envelope import format_timestamp
from ..domain.pipeline import RouteContext, RouteDefinition


JOKES = [
    "Why do programmers prefer dark mode? Because light attracts bugs!",
    "Why do Java developers wear glasses? Because they can't C#!",
    'A SQL query walks into a bar, walks up to two tables and asks, "Can I join you?"',
    "Why do programmers always mix up Halloween and Christmas? Because Oct 31 equals Dec 25!",
]

QUOTES = [
    {"text": "The only way to do great work is to love what you do.", "author": "Steve Jobs"},
    {"text": "Innovation distinguishes between a leader and a follower.", "author": "Steve Jobs"},
    {"text": "Life is what happens when you're busy making other plans.", "author": "John Lennon"},
    {"text": "The future belongs to those who believe in the beauty of their dreams.", "author": "Eleanor Roosevelt"},
]


def random_joke(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "joke": ctx.rng.choice(JOKES),
        "category": "programming",
        "safe": True,
        "language": "en",
    }


def random_quote(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    quote = ctx.rng.choice(QUOTES)
    return {
        "quote": quote["text"],
        "author": quote["author"],
        "category": "inspirational",
    }


def random_news(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": "Breaking News: New API Version Released",
        "description": "A new API version has been released with 30+ free endpoints!",
        "source": "Demo News",
        "published_at": format_timestamp(ctx.now()),
        "url": "https://demo-news.com/article",
        "image": "https://picsum.photos/400/250?text=News",
    }


ROUTES = [
    RouteDefinition(
        name="jokes_random",
        method="GET",
        path="/api/jokes/random",
        handler=random_joke,
        message="Random joke retrieved",
    ),
    RouteDefinition(
        name="quotes_random",
        method="GET",
        path="/api/quotes/random",
        handler=random_quote,
        message="Random quote retrieved",
    ),
    RouteDefinition(
        name="news_random",
        method="GET",
        path="/api/news/random",
        handler=random_news,
        message="Random news article retrieved",
    ),
]
