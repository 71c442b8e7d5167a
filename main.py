import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gymhub.config import get_settings
from gymhub.infrastructure.database import engine, initialize_database
from gymhub.infrastructure.notifications import notification_retry_queue
from gymhub.interfaces.api.errors import register_exception_handlers
from gymhub.interfaces.api.routes import register_routes

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables and run the notification retry worker while serving."""

    initialize_database()
    notification_retry_queue.start()
    yield
    notification_retry_queue.stop()
    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the main FastAPI application."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="GymHub", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
