"""Custom exception handlers for FastAPI application.

Every failure of the bands flow ends up here and becomes the same generic
500 body. The caller is never told WHICH stage failed (token, playlist or
artists); that detail only goes to the logs.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bandstosee.domain.exceptions import DomainException, ExternalServiceError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "It would appear that this failed."


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers converting domain exceptions into the generic 500 response.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request, exc: DomainException
    ) -> JSONResponse:
        """Handle every domain exception with 500 and {"Err": ...}."""
        extra: dict[str, object] = {
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error": exc.message,
        }
        if isinstance(exc, ExternalServiceError) and exc.http_status is not None:
            extra["upstream_status"] = exc.http_status

        logger.error(
            "Request to %s failed: %s: %s",
            request.url.path,
            type(exc).__name__,
            exc.message,
            exc_info=exc,
            extra=extra,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"Err": GENERIC_ERROR_MESSAGE},
        )

    # Anything else escaping a route (a bug, or a malformed Spotify payload we didn't
    # anticipate) still gets the same body instead of Starlette's plain-text 500.
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions with 500 and {"Err": ...}."""
        logger.exception(
            "Unhandled error at %s",
            request.url.path,
            exc_info=exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"Err": GENERIC_ERROR_MESSAGE},
        )
