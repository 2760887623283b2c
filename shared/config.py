"""
Shared configuration management for the Anime & Media API.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MEDIA_API_",
        case_sensitive=False,
        populate_by_name=True,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Service metadata
    api_name: str = Field(default="Anime & Media API")
    api_version: str = Field(default="7.0.0")

    # Cache
    cache_ttl_seconds: int = Field(default=600)
    random_cache_ttl_seconds: int = Field(default=300)
    cache_check_period_seconds: int = Field(default=120)

    # Rate limiting
    rate_limit_points: int = Field(default=100)
    rate_limit_duration_seconds: int = Field(default=60)
    trust_forwarded_headers: bool = Field(default=False)

    # Upstreams
    upstream_timeout_seconds: float = Field(default=30.0)
    jikan_base_url: str = Field(default="https://api.jikan.moe/v4")
    invidious_base_url: str = Field(default="https://yewtu.be")

    # Placeholder data
    random_seed: Optional[int] = Field(default=None)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = Field(default=3000, validation_alias=AliasChoices("PORT", "MEDIA_API_PORT", "port"))
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, **kwargs):
        super().__init__(service_name=service_name, **kwargs)


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
