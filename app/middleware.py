# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: request ID propagation and per-route Prometheus metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from app.metrics import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

# Probes and docs are scraped constantly; keep them out of the request metrics.
UNTRACKED_PATHS = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})

UNMATCHED_ROUTE = "unmatched"
MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Echo the caller's X-Request-ID, or mint one, on every response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", "")[:MAX_REQUEST_ID_LENGTH]
        request_id = request_id or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def route_template(request: Request) -> str:
    """Label a request by its route pattern, so member ids and emails never become labels."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return getattr(route, "path", UNMATCHED_ROUTE)
    return UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count requests, errors and latency per method and route pattern."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        route = route_template(request)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=route, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=route).observe(elapsed)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=route, status=status).inc()
        return response
