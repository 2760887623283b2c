"""
Async HTTP client wrapper used for every third-party data source.
"""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from typing import Any, Dict, Optional, TYPE_CHECKING

import httpx

from shared.errors import UpstreamError
from shared.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_TIMEOUT = 30.0


class UpstreamClient:
    """Single-attempt JSON fetcher with a hard timeout.

    Every failure mode (transport error, timeout, non-2xx status, body that
    is not JSON) surfaces as :class:`UpstreamError`; httpx exception types
    never leak to callers.
    """

    def __init__(
        self,
        name: str,
        base_url: str = "",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger(f"media_api.upstream.{name}")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def fetch(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        method: str = "GET",
        **options: Any,
    ) -> Any:
        """Issue one request and return the decoded JSON body."""
        url = self.url_for(path)
        outcome = "error"

        try:
            with self._timed():
                response = await asyncio.wait_for(
                    self._get_client().request(method, url, params=params, **options),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                data = response.json()
            outcome = "success"
            self.logger.debug("Upstream response received", url=url, status_code=response.status_code)
            return data
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            outcome = "timeout"
            self.logger.error("Upstream request timed out", url=url, timeout=self.timeout)
            raise UpstreamError(
                f"Request failed: timeout of {self._format_timeout()} exceeded",
                details={"upstream": self.name, "url": url},
            ) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            self.logger.error("Upstream request failed", url=url, status_code=status_code)
            raise UpstreamError(
                f"Request failed: upstream responded with status code {status_code}",
                details={"upstream": self.name, "url": url, "status_code": status_code},
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.error("Upstream transport error", url=url, error=str(exc))
            raise UpstreamError(
                f"Request failed: {str(exc) or type(exc).__name__}",
                details={"upstream": self.name, "url": url},
            ) from exc
        except ValueError as exc:
            self.logger.error("Upstream returned invalid JSON", url=url, error=str(exc))
            raise UpstreamError(
                "Request failed: upstream returned invalid JSON",
                details={"upstream": self.name, "url": url},
            ) from exc
        finally:
            if self.metrics:
                self.metrics.increment_counter("upstream_requests_total", upstream=self.name, outcome=outcome)

    def _timed(self):
        if not self.metrics:
            return nullcontext()
        return self.metrics.time_operation("upstream_request_duration_seconds", upstream=self.name)

    def _format_timeout(self) -> str:
        return f"{int(self.timeout * 1000)}ms"
