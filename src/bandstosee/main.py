"""FastAPI application entry point."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

import uvicorn
from fastapi import FastAPI

from bandstosee.api import api_router
from bandstosee.api.exception_handlers import register_exception_handlers
from bandstosee.config import get_settings
from bandstosee.infrastructure.lifecycle import lifespan
from bandstosee.infrastructure.observability import RequestLoggingMiddleware

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[None]]


def create_app(app_lifespan: Lifespan | None = lifespan) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_lifespan: Lifespan to run (tests pass None and fill app.state themselves)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Bands To See API",
        description="Bands from a Spotify playlist, enriched with artist data",
        version="1.0.0",
        lifespan=app_lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


def main() -> None:
    """Run the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "bandstosee.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
