from contextlib import asynccontextmanager
import logging

from anyio import to_thread
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.bootstrap import (
    build_notification_consumer,
    build_notification_publisher,
    build_notification_store,
)
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.logging_config import configure_logging
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database, store, publisher and consumer; release them on shutdown."""

    settings = get_settings()
    configure_logging(settings.log_level)
    initialize_database()

    store = build_notification_store(settings)
    publisher = build_notification_publisher(settings)
    consumer = None
    if settings.notification_consumer_enabled:
        consumer = build_notification_consumer(settings, store)
        consumer.start()

    app.state.notification_store = store
    app.state.notification_publisher = publisher
    app.state.notification_consumer = consumer
    try:
        yield
    finally:
        if consumer is not None:
            # Joining the consumer thread blocks; keep it off the event loop.
            await to_thread.run_sync(consumer.stop)
        publisher.close()
        store.close()
        engine.dispose()
        logger.info("Application resources released")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Rating Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
