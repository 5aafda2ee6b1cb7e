"""
HTTP request metrics.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from huissier.infrastructure.monitoring import metrics

UNMATCHED = "unmatched"


def route_label(request: Request) -> str:
    """
    Return route template for request.

    Unknown paths collapse into one label so scanners cannot grow the
    series count.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED)
    return UNMATCHED


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count requests and time them per route."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        endpoint = route_label(request)
        method = request.method
        status = 500
        started = time.perf_counter()

        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            metrics.http_request_duration_seconds.labels(
                method=method, endpoint=endpoint
            ).observe(time.perf_counter() - started)
            metrics.http_requests_total.labels(
                method=method, endpoint=endpoint, status=status
            ).inc()
