from fastapi import FastAPI

from .directory import router as directory_router
from .notifications import router as notifications_router
from .requests import router as requests_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(requests_router)
    app.include_router(notifications_router)
    app.include_router(directory_router)
