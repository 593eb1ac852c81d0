"""HTTP middleware: one access log line per request, correlation ID in and out."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from bandstosee.infrastructure.observability.logging import set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


# Hey future me - uvicorn.access is silenced in configure_logging, so this IS the access log.
# Whatever correlation ID the request ran under goes back to the caller, so a client that
# reports "/userdata gave me a 500" can hand us the ID to grep for.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with status and duration, tagged with its correlation ID."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        route = f"{request.method} {request.url.path}"
        context = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled error on %s after %dms",
                route,
                _elapsed_ms(started),
                extra={**context, "error_type": type(e).__name__},
            )
            raise

        elapsed = _elapsed_ms(started)
        marker = "✗" if response.status_code >= 400 else "✓"
        logger.info(
            "%s %s → %d (%dms)",
            marker,
            route,
            response.status_code,
            elapsed,
            extra={**context, "status_code": response.status_code, "duration_ms": elapsed},
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
