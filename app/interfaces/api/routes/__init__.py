from fastapi import FastAPI

from .health import router as health_router
from .internal import router as internal_router
from .notifications import router as notifications_router
from .ratings import router as ratings_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(health_router)
    app.include_router(ratings_router)
    app.include_router(notifications_router)
    app.include_router(internal_router)
