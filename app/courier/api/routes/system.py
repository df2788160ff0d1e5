from fastapi import APIRouter, Request

from courier.api.rate_limits import READ_LIMIT, get_limiter

router = APIRouter(tags=["System"])
limiter = get_limiter()


@router.get("/version")
@limiter.limit(READ_LIMIT)
def get_version(request: Request):
    """Get the version of the application."""
    return {"version": request.app.state.app_version}


@router.get("/health")
@limiter.limit(READ_LIMIT)
def get_health(request: Request):
    """Healthcheck endpoint.

    Reports "degraded" when any configured channel fails its health
    check; unconfigured channels are listed but do not affect the status.
    """
    channels = request.app.state.engine.health_check()
    configured = [c for c in channels.values() if c["status"] != "not_configured"]
    healthy = all(c["healthy"] for c in configured)
    return {"status": "ok" if healthy else "degraded", "channels": channels}
