"""
HTTP middleware: request logging/metrics and security headers.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import get_settings
from .utils.metrics import REQUEST_COUNTER, REQUEST_LATENCY

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def route_template(request: Request) -> str:
    """
    Path label for metrics.

    Uses the matched route (`/api/v1/resources/{resource_id}`) so that every
    resource id does not become its own time series.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request as one structured line and records its latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        path = route_template(request)
        REQUEST_COUNTER.labels(method=request.method, path=path).inc()
        REQUEST_LATENCY.labels(method=request.method, path=path).observe(elapsed)

        logger.info(
            "HTTP request processed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "route": path,
                "query": str(request.url.query) or None,
                "status_code": response.status_code,
                "response_time_ms": round(elapsed * 1000, 2),
            },
        )

        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the standard security headers; HSTS only in production."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers.update(SECURITY_HEADERS)
        if get_settings().ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
