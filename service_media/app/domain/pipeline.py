"""
Parametrized request pipeline shared by every catalog route.

A route is declared once as a :class:`RouteDefinition`; :class:`RoutePipeline`
runs it through validate -> cache lookup -> fetch or synthesize -> normalize ->
cache populate -> envelope. Failures at any step end the request with an
error envelope instead of propagating.
"""

from __future__ import annotations

import inspect
import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from shared.envelope import Envelope, EnvelopeFactory, utc_now
from shared.errors import InternalError, MediaApiException, ValidationError
from shared.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector
    from ..adapters.invidious_client import InvidiousClient
    from ..adapters.jikan_client import JikanClient
    from ..caching.cache_manager import CacheManager


CACHE_HIT_MESSAGE = "Data from cache"


class CachePolicy(Enum):
    """How long a route's normalized output may be reused."""

    NONE = "none"
    DEFAULT = "default"
    SHORT = "short"


@dataclass(frozen=True)
class RequiredParam:
    name: str
    message: str


@dataclass
class RouteContext:
    """Collaborators handed to every route handler."""

    anime: Optional["JikanClient"] = None
    videos: Optional["InvidiousClient"] = None
    rng: random.Random = field(default_factory=random.Random)
    now: Callable[[], datetime] = utc_now


Handler = Callable[[RouteContext, Dict[str, Any]], Union[Any, Awaitable[Any]]]
Normalizer = Callable[[Any, Dict[str, Any]], Any]


@dataclass(frozen=True)
class RouteDefinition:
    """Everything the pipeline needs to serve one endpoint."""

    name: str
    method: str
    path: str
    handler: Handler
    message: str
    required: Tuple[RequiredParam, ...] = ()
    defaults: Mapping[str, Any] = field(default_factory=dict)
    integers: Tuple[str, ...] = ()
    normalize: Optional[Normalizer] = None
    cache: CachePolicy = CachePolicy.NONE
    summary: str = ""
    tags: Tuple[str, ...] = ()

    @property
    def param_names(self) -> Tuple[str, ...]:
        names = [param.name for param in self.required]
        names.extend(name for name in self.defaults if name not in names)
        return tuple(names)


class RoutePipeline:
    """Executes route definitions against the shared cache and upstream clients."""

    def __init__(
        self,
        context: RouteContext,
        cache_manager: "CacheManager",
        envelopes: EnvelopeFactory,
        *,
        short_ttl: Optional[float] = None,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.context = context
        self.cache_manager = cache_manager
        self.envelopes = envelopes
        self.short_ttl = short_ttl
        self.metrics = metrics
        self.logger = get_logger("media_api.pipeline")

    def validate(self, definition: RouteDefinition, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Check required parameters and return the effective parameter set.

        Only declared parameters survive, with defaults filled in, so the
        result doubles as the canonical cache key input.
        """
        for param in definition.required:
            if _is_blank(raw.get(param.name)):
                raise ValidationError(param.message, details={"field": param.name})

        params: Dict[str, Any] = {}
        for name in definition.param_names:
            value = raw.get(name)
            if _is_blank(value):
                value = definition.defaults.get(name)
            if value is None:
                params[name] = None
                continue

            if name in definition.integers:
                params[name] = _as_positive_int(name, value)
            elif isinstance(value, str):
                params[name] = value
            else:
                raise ValidationError(f'Parameter "{name}" must be a string', details={"field": name})
        return params

    async def execute(self, definition: RouteDefinition, raw: Mapping[str, Any]) -> Tuple[int, Envelope]:
        """Run one request and return the HTTP status with its envelope."""
        try:
            params = self.validate(definition, raw)

            cached = definition.cache is not CachePolicy.NONE
            if cached:
                hit, value = self.cache_manager.lookup(definition.name, params)
                if hit:
                    return 200, self.envelopes.success(value, CACHE_HIT_MESSAGE)

            result = definition.handler(self.context, params)
            if inspect.isawaitable(result):
                result = await result

            data = definition.normalize(result, params) if definition.normalize else result

            if cached:
                ttl = self.short_ttl if definition.cache is CachePolicy.SHORT else None
                self.cache_manager.store(definition.name, params, data, ttl=ttl)

            return 200, self.envelopes.success(data, definition.message)

        except MediaApiException as exc:
            self.logger.warning(
                "Route failed",
                route=definition.name,
                code=exc.code,
                message=exc.message,
                status_code=exc.status_code
            )
            self._record_error(exc.code)
            return exc.status_code, self.envelopes.error(exc.message)

        except Exception as exc:
            self.logger.error("Route handler crashed", route=definition.name, error=str(exc), exc_info=True)
            error = InternalError()
            self._record_error(error.code)
            return error.status_code, self.envelopes.error(error.message)

    def _record_error(self, code: str) -> None:
        if self.metrics:
            self.metrics.record_error(code)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _as_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f'Parameter "{name}" must be a positive integer', details={"field": name})
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f'Parameter "{name}" must be a positive integer', details={"field": name})
    if number < 1:
        raise ValidationError(f'Parameter "{name}" must be a positive integer', details={"field": name})
    return number
