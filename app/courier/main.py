"""ASGI application entry point.

Serve with any ASGI server using the factory, e.g. ``create_server``.
"""

from fastapi import FastAPI

from courier.api import create_app
from courier.configuration import Settings
from courier.logging import get_module_logger
from courier.notifications import build_engine

logger = get_module_logger()


def create_server() -> FastAPI:
    """Build settings, the engine and the API application."""
    settings = Settings()
    engine = build_engine(settings)
    logger.info(
        "application_startup",
        environment=settings.ENVIRONMENT,
        version=settings.APP_VERSION,
        channels=[channel.value for channel in engine.list_channels()],
    )
    return create_app(engine, app_version=settings.APP_VERSION)
