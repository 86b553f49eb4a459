"""Request instrumentation for FastAPI applications.

Adds a server span around every request and records the full request
URL on it. Instrumentation cannot be removed once attached.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import Span
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)

MIDDLEWARE_NAME = "http-server"
SERVER_NAME_ATTRIBUTE = "http.server_name"
FULL_URL_ATTRIBUTE = "http.full_url"


def instrument_app(app: FastAPI, provider: TracerProvider) -> None:
    """Attach tracing middleware to an application.

    The URL-recording middleware is registered before the OpenTelemetry
    middleware so that it runs inside the server span.

    Args:
        app: Application to instrument. Must not have started serving.
        provider: Tracer provider that creates the server spans.
    """
    app.add_middleware(BaseHTTPMiddleware, dispatch=record_full_url)
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=provider,
        server_request_hook=_tag_server_span,
    )
    logger.info(f"Tracing middleware {MIDDLEWARE_NAME} attached")


async def record_full_url(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Record the full request URL on the active span."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(FULL_URL_ATTRIBUTE, str(request.url))
    return await call_next(request)


def _tag_server_span(span: Span, scope: Dict[str, Any]) -> None:
    if span and span.is_recording():
        span.set_attribute(SERVER_NAME_ATTRIBUTE, MIDDLEWARE_NAME)
