"""
Structured logging for the Media API.

Every event is rendered as one JSON object carrying the service name and,
inside a request, the request id and the rate-limit identity of the caller.
Local runs get structlog's console renderer instead.
"""

import logging
import sys
import uuid
from typing import Any, Dict, Optional

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars, merge_contextvars


PLAIN_TEXT_ENVIRONMENTS = frozenset({"local"})


def configure_logging(service_name: str, log_level: str = "info", env: str = "production") -> None:
    """Configure structlog and the stdlib root handler for a service."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if env in PLAIN_TEXT_ENVIRONMENTS
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            ServiceStamp(service_name),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    # uvicorn's access log duplicates the request log line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


class ServiceStamp:
    """Processor that tags each event with the owning service."""

    def __init__(self, service_name: str):
        self.service_name = service_name

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", self.service_name)
        return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind the request id for the rest of the current request."""
    request_id = request_id or str(uuid.uuid4())
    bind_contextvars(request_id=request_id)
    return request_id


def set_client_context(client_id: Optional[str] = None) -> None:
    """Bind the caller's rate-limit identity."""
    if client_id:
        bind_contextvars(client_id=client_id)


def current_context() -> Dict[str, Any]:
    return get_contextvars()


def clear_context() -> None:
    clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
