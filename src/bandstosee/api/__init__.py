"""API module for bandstosee.

Structure:
- routers/: HTTP endpoints (bands, health)
- schemas/: Pydantic response models
- dependencies.py: Dependency injection from app.state
- exception_handlers.py: Global error handlers
"""

from bandstosee.api.routers import api_router

__all__ = ["api_router"]
