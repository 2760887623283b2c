"""
Base service class for Anime & Media API services.
"""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import time

from shared.config import ServiceConfig, get_config
from shared.envelope import EnvelopeFactory
from shared.logging import configure_logging, get_logger, set_request_id, clear_context
from shared.metrics import MetricsCollector, get_metrics_collector
from shared.errors import MediaApiException, NotFoundError, RateLimitError


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


class BaseService:
    """Base service class with common functionality."""

    def __init__(
        self,
        service_name: str,
        config: Optional[ServiceConfig] = None,
        *,
        metrics: Optional[MetricsCollector] = None,
        envelopes: Optional[EnvelopeFactory] = None,
    ):
        self.service_name = service_name
        self.config = config or get_config(service_name)
        self.port = self.config.port

        # Configure logging
        configure_logging(service_name, self.config.log_level, self.config.env)
        self.logger = get_logger(service_name)

        self.metrics = metrics or get_metrics_collector(service_name)
        self.envelopes = envelopes or EnvelopeFactory()

        # Create FastAPI app
        self.app = self._create_app()

        # Set up middleware
        self._setup_middleware()

        # Set up routes
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self.on_startup()
            try:
                yield
            finally:
                await self.on_shutdown()

        return FastAPI(
            title=self.config.api_name,
            description=f"{self.config.api_name} - anime, video and media utility endpoints",
            version=self.config.api_version,
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url="/redoc" if self.config.env == "local" else None,
            lifespan=lifespan,
        )

    async def on_startup(self) -> None:
        """Start background resources. Override in subclasses."""

    async def on_shutdown(self) -> None:
        """Release background resources. Override in subclasses."""

    def _setup_middleware(self):
        """Set up middleware."""

        # CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type", "Authorization"],
        )

        self.app.add_middleware(GZipMiddleware, minimum_size=1000)

        # Request timing middleware
        @self.app.middleware("http")
        async def add_request_timing(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            finally:
                clear_context()

            duration = time.perf_counter() - start_time
            route = request.scope.get("route")
            endpoint = getattr(route, "path", "unmatched")

            # Record metrics
            self.metrics.record_http_request(
                method=request.method,
                endpoint=endpoint,
                status_code=response.status_code,
                duration=duration
            )

            # Log request
            self.logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
                request_id=request_id
            )

            response.headers["X-Request-ID"] = request_id
            for header, value in SECURITY_HEADERS.items():
                response.headers.setdefault(header, value)
            return response

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from prometheus_client import CONTENT_TYPE_LATEST
            return Response(
                content=self.metrics.render(),
                media_type=CONTENT_TYPE_LATEST
            )

        # Error handlers
        @self.app.exception_handler(MediaApiException)
        async def media_api_exception_handler(request: Request, exc: MediaApiException):
            """Handle MediaApiException."""
            return self.error_response(exc)

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            """Render framework HTTP errors (unknown route, wrong method) as envelopes."""
            if exc.status_code == 404:
                return self.error_response(NotFoundError(details={"path": request.url.path}))
            if exc.status_code == 405:
                message = "Method not allowed"
            else:
                message = str(exc.detail)
            envelope = self.envelopes.error(message)
            return JSONResponse(
                status_code=exc.status_code,
                content=envelope.to_dict(),
                headers=getattr(exc, "headers", None),
            )

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            self.metrics.record_error(type(exc).__name__)
            return JSONResponse(
                status_code=500,
                content=self.envelopes.error("Internal server error").to_dict()
            )

    def error_response(self, exc: MediaApiException) -> JSONResponse:
        """Convert a MediaApiException into an error envelope response."""
        headers = {}
        retry_after_ms = None
        if isinstance(exc, RateLimitError):
            retry_after_ms = exc.retry_after_ms
            headers["Retry-After"] = str(max(1, -(-retry_after_ms // 1000)))
        else:
            self.logger.warning(
                "Request failed",
                code=exc.code,
                message=exc.message,
                status_code=exc.status_code,
                details=exc.details
            )
        self.metrics.record_error(exc.code)
        envelope = self.envelopes.error(exc.message, retry_after_ms=retry_after_ms)
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope.to_dict(),
            headers=headers or None,
        )

    def _get_uptime(self) -> int:
        """Get service uptime in seconds."""
        return self.envelopes.uptime()

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
