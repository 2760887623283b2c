"""
Media API service for the Anime & Media API.
"""

import json
import platform
import random
import resource
import sys
from typing import Any, Dict, List, Optional

from fastapi import Depends, Request, Response

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.envelope import EnvelopeFactory, format_timestamp
from shared.errors import RateLimitError, ValidationError
from shared.logging import set_client_context
from shared.metrics import MetricsCollector

from .adapters.invidious_client import InvidiousClient
from .adapters.jikan_client import JikanClient
from .adapters.upstream_client import UpstreamClient
from .caching.cache_manager import CacheManager
from .caching.ttl_cache import TTLCache
from .domain.pipeline import RouteContext, RouteDefinition, RoutePipeline
from .ratelimit.fixed_window import FixedWindowRateLimiter, RateLimitMiddleware
from .routes import ALL_ROUTES


SERVICE_NAME = "media_api"

# Status and health sit outside the route catalog.
SYSTEM_API_COUNT = 2

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class MediaApiService(BaseService):
    """Anime & Media API service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        metrics: Optional[MetricsCollector] = None,
        envelopes: Optional[EnvelopeFactory] = None,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
        cache: Optional[TTLCache] = None,
        jikan_transport=None,
        invidious_transport=None,
        rng: Optional[random.Random] = None,
        routes: Optional[List[RouteDefinition]] = None,
    ):
        self.routes = list(routes if routes is not None else ALL_ROUTES)
        config = config or get_config(SERVICE_NAME)
        self._rate_limiter = rate_limiter
        self._cache = cache
        self._transports = {"jikan": jikan_transport, "invidious": invidious_transport}
        self._rng = rng
        super().__init__(SERVICE_NAME, config, metrics=metrics, envelopes=envelopes)

    def _setup_routes(self):
        """Build collaborators, then register system and catalog routes."""
        super()._setup_routes()
        config = self.config

        self.cache_manager = CacheManager(
            self._cache if self._cache is not None else TTLCache(config.cache_ttl_seconds),
            metrics=self.metrics,
            check_period=config.cache_check_period_seconds,
        )
        self.rate_limiter = self._rate_limiter or FixedWindowRateLimiter(
            config.rate_limit_points,
            config.rate_limit_duration_seconds,
        )
        self.cache_manager.on_sweep(self.rate_limiter.prune)
        self.rate_limit_middleware = RateLimitMiddleware(
            self.rate_limiter,
            trust_forwarded_headers=config.trust_forwarded_headers,
        )

        self.jikan_upstream = UpstreamClient(
            "jikan",
            config.jikan_base_url,
            timeout=config.upstream_timeout_seconds,
            transport=self._transports["jikan"],
            metrics=self.metrics,
        )
        self.invidious_upstream = UpstreamClient(
            "invidious",
            config.invidious_base_url,
            timeout=config.upstream_timeout_seconds,
            transport=self._transports["invidious"],
            metrics=self.metrics,
        )

        self.context = RouteContext(
            anime=JikanClient(self.jikan_upstream),
            videos=InvidiousClient(self.invidious_upstream),
            rng=self._rng or random.Random(config.random_seed),
            now=self.envelopes.now,
        )
        self.pipeline = RoutePipeline(
            self.context,
            self.cache_manager,
            self.envelopes,
            short_ttl=config.random_cache_ttl_seconds,
            metrics=self.metrics,
        )

        self._setup_system_routes()
        for definition in self.routes:
            self._register_route(definition)

        # Expose service instance via app state for introspection/testing
        self.app.state.media_service = self

    async def on_startup(self) -> None:
        await self.cache_manager.start_sweeper()
        self.logger.info(
            "Media API started",
            port=self.config.port,
            total_apis=len(self.routes) + SYSTEM_API_COUNT,
        )

    async def on_shutdown(self) -> None:
        await self.cache_manager.stop_sweeper()
        await self.jikan_upstream.close()
        await self.invidious_upstream.close()
        self.logger.info("Media API stopped")

    async def _enforce_rate_limit(self, request: Request, response: Response) -> Dict[str, Any]:
        """Consume one point for the caller, raising once the window is spent."""
        result = self.rate_limit_middleware.check_request(request)
        set_client_context(result["client_id"])

        if not result["allowed"]:
            route = request.scope.get("route")
            self.metrics.increment_counter(
                "rate_limit_rejections_total",
                endpoint=getattr(route, "path", request.url.path),
            )
            raise RateLimitError(
                retry_after_ms=result["retry_after_ms"],
                details={"client_id": result["client_id"], "limit": result["limit"]},
            )

        self._set_rate_limit_headers(response, result)
        return result

    def _set_rate_limit_headers(self, response: Response, rate_result: Dict[str, Any]) -> None:
        """Propagate rate limiting metadata via standard headers."""
        response.headers["X-RateLimit-Limit"] = str(rate_result["limit"])
        response.headers["X-RateLimit-Remaining"] = str(rate_result["remaining"])
        response.headers["X-RateLimit-Reset"] = str(rate_result["reset_in_seconds"])

    def _setup_system_routes(self):
        """Set up landing, status and health routes."""

        @self.app.get("/", include_in_schema=False)
        async def root():
            """Service descriptor."""
            return {
                "name": self.config.api_name,
                "version": self.config.api_version,
                "status": "active",
                "total_apis": len(self.routes) + SYSTEM_API_COUNT,
                "endpoints": sorted({definition.path for definition in self.routes}),
                "docs": "/docs" if self.app.docs_url else None,
                "status_url": "/api/status",
                "health_url": "/api/health",
            }

        @self.app.get("/api/status", tags=["system"], dependencies=[Depends(self._enforce_rate_limit)])
        async def api_status():
            """Runtime status of the API process."""
            uptime = self._get_uptime()
            data = {
                "api_name": self.config.api_name,
                "version": self.config.api_version,
                "uptime_seconds": uptime,
                "uptime_human": format_uptime(uptime),
                "memory_usage": memory_usage(),
                "python_version": platform.python_version(),
                "platform": sys.platform,
                "total_apis": len(self.routes) + SYSTEM_API_COUNT,
                "cache_size": self.cache_manager.size(),
                "rate_limit": {
                    "requests": self.rate_limiter.points,
                    "duration": f"{int(self.rate_limiter.duration)} seconds",
                },
            }
            return self.envelopes.success(data, "API Status Retrieved").to_dict()

        @self.app.get("/api/health", tags=["system"])
        async def health_check():
            """Health check; never rate limited."""
            return {
                "status": "healthy",
                "timestamp": format_timestamp(self.envelopes.now()),
                "uptime": self._get_uptime(),
            }

    def _register_route(self, definition: RouteDefinition) -> None:
        """Attach one catalog route to the app through the shared pipeline."""

        async def endpoint(request: Request, response: Response):
            raw = await self._read_params(definition, request)
            status_code, envelope = await self.pipeline.execute(definition, raw)
            response.status_code = status_code
            return envelope.to_dict()

        endpoint.__name__ = definition.name
        self.app.add_api_route(
            definition.path,
            endpoint,
            methods=[definition.method],
            name=definition.name,
            summary=definition.summary or definition.message,
            tags=list(definition.tags),
            dependencies=[Depends(self._enforce_rate_limit)],
        )

    async def _read_params(self, definition: RouteDefinition, request: Request) -> Dict[str, Any]:
        """GET routes read the query string; POST routes read a JSON or form-encoded body."""
        if definition.method == "GET":
            return dict(request.query_params)

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPE):
            form = await request.form()
            return dict(form.items())

        body = await request.body()
        if not body.strip():
            return {}
        try:
            payload = json.loads(body)
        except ValueError:
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        return payload


def format_uptime(seconds: int) -> str:
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes}m {secs}s"


def memory_usage() -> Dict[str, str]:
    """Peak resident set size and current self usage, in MB."""
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is kilobytes on Linux, bytes on macOS
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return {
        "max_rss": f"{round(usage.ru_maxrss / divisor)}MB",
        "user_cpu_seconds": f"{usage.ru_utime:.2f}",
        "system_cpu_seconds": f"{usage.ru_stime:.2f}",
    }


def create_app(config: Optional[ServiceConfig] = None, **kwargs):
    """Build the ASGI app, for ``uvicorn service_media.app.main:create_app --factory``."""
    return MediaApiService(config, **kwargs).app


if __name__ == "__main__":
    service = MediaApiService()
    service.run()
