"""
Utility routes: weather, URL shortening, QR codes and input validation.
"""

import re
import string
from typing import Any, Dict
from urllib.parse import quote

from shared.envelope import format_timestamp
from ..domain.pipeline import RequiredParam, RouteContext, RouteDefinition


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')

SHORT_ID_ALPHABET = string.digits + string.ascii_lowercase
SHORT_ID_LENGTH = 6

STRENGTH_LEVELS = ("weak", "medium", "strong", "very strong")


def weather(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "city": params["city"],
        "temperature": "22°C",
        "feels_like": "20°C",
        "description": "Partly cloudy",
        "humidity": "65%",
        "wind_speed": "15 km/h",
        "pressure": "1013 hPa",
        "visibility": "10 km",
        "uv_index": "5",
        "sunrise": "06:30",
        "sunset": "18:45",
    }


def shorten(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    short_id = "".join(ctx.rng.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))
    return {
        "original_url": params["url"],
        "short_url": f"https://short.link/{short_id}",
        "short_id": short_id,
        "clicks": 0,
        "created_at": format_timestamp(ctx.now()),
    }


def expand(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "short_url": params["short_url"],
        "original_url": "https://example.com/original-long-url-demo",
        "created_at": format_timestamp(ctx.now()),
        "clicks": ctx.rng.randrange(1000),
    }


def qr_code(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    text, size = params["text"], params["size"]
    return {
        "text": text,
        "size": size,
        "qr_url": (
            "https://api.qrserver.com/v1/create-qr-code/"
            f"?size={quote(size)}x{quote(size)}&data={quote(text, safe='')}"
        ),
        "format": "PNG",
    }


def validate_email(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    email = params["email"]
    local_part, _, domain = email.partition("@")
    return {
        "email": email,
        "is_valid": bool(EMAIL_PATTERN.match(email)),
        "domain": domain or None,
        "local_part": local_part,
    }


def password_checks(password: str) -> Dict[str, bool]:
    return {
        "length": len(password) >= 8,
        "uppercase": any(char.isascii() and char.isupper() for char in password),
        "lowercase": any(char.isascii() and char.islower() for char in password),
        "numbers": any(char.isascii() and char.isdigit() for char in password),
        "special": bool(SPECIAL_CHARACTERS.search(password)),
    }


def strength_level(score: int) -> str:
    # two or fewer passing checks is weak, each further check moves up a level
    return STRENGTH_LEVELS[min(max(score - 2, 0), len(STRENGTH_LEVELS) - 1)]


def validate_password(ctx: RouteContext, params: Dict[str, Any]) -> Dict[str, Any]:
    checks = password_checks(params["password"])
    score = sum(checks.values())
    return {
        "password": "••••••••",
        "is_valid": checks["length"] and checks["lowercase"] and checks["uppercase"] and checks["numbers"],
        "strength": strength_level(score),
        "strength_score": score,
        "checks": checks,
    }


ROUTES = [
    RouteDefinition(
        name="weather",
        method="GET",
        path="/api/weather",
        handler=weather,
        message="Weather data retrieved",
        required=(RequiredParam("city", "City parameter is required"),),
    ),
    RouteDefinition(
        name="shorten",
        method="GET",
        path="/api/shorten",
        handler=shorten,
        message="URL shortened",
        required=(RequiredParam("url", "URL parameter is required"),),
    ),
    RouteDefinition(
        name="expand",
        method="GET",
        path="/api/expand",
        handler=expand,
        message="URL expanded",
        required=(RequiredParam("short_url", "Short URL parameter is required"),),
    ),
    RouteDefinition(
        name="qr",
        method="GET",
        path="/api/qr",
        handler=qr_code,
        message="QR code generated",
        required=(RequiredParam("text", "Text parameter is required"),),
        defaults={"size": "200"},
    ),
    RouteDefinition(
        name="validate_email",
        method="POST",
        path="/api/validate/email",
        handler=validate_email,
        message="Email validation completed",
        required=(RequiredParam("email", "Email is required"),),
    ),
    RouteDefinition(
        name="validate_password",
        method="POST",
        path="/api/validate/password",
        handler=validate_password,
        message="Password validation completed",
        required=(RequiredParam("password", "Password is required"),),
    ),
]
