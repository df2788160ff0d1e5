"""HTTP API for submitting notifications.

Usage:
    from courier.api import create_app
    from courier.configuration import Settings
    from courier.notifications import build_engine

    settings = Settings()
    app = create_app(build_engine(settings), app_version=settings.APP_VERSION)
"""

from fastapi import FastAPI

from courier.api.rate_limits import setup_rate_limiter
from courier.api.router import api_router
from courier.notifications import NotificationEngine


def create_app(engine: NotificationEngine, app_version: str = "unknown") -> FastAPI:
    """Build the FastAPI application around an engine."""
    app = FastAPI(title="courier", version=app_version)
    app.state.engine = engine
    app.state.app_version = app_version
    setup_rate_limiter(app)
    app.include_router(api_router)
    return app


__all__ = ["create_app"]
