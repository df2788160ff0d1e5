from typing import Any, Dict, List

from fastapi import APIRouter, Request

from courier.api.rate_limits import READ_LIMIT, SUBMIT_LIMIT, get_limiter
from courier.logging import get_module_logger
from courier.notifications import DispatchResult, NotificationRequest

logger = get_module_logger()

router = APIRouter(tags=["Notifications"])
limiter = get_limiter()


@router.post("/notifications", response_model=DispatchResult)
@limiter.limit(SUBMIT_LIMIT)
def submit_notification(request: Request, notification: NotificationRequest):
    """
    Submit a notification for dispatch.

    Blocks until the request settles, including delivery verification for
    asynchronous channels, and returns the DispatchResult. Delivery
    failures are reported in the result body with a 200; only malformed
    requests are rejected (422).

    Args:
        request (Request): The FastAPI request object.
        notification (NotificationRequest): The request to dispatch.

    Returns:
        DispatchResult: The settled result.
    """
    logger.info(
        "notification_submitted_via_api",
        notification_id=notification.id,
        channel=notification.channel.value,
        client=request.client.host if request.client else "unknown",
    )
    return request.app.state.engine.submit(notification)


@router.get("/channels")
@limiter.limit(READ_LIMIT)
def list_channels(request: Request) -> Dict[str, List[Dict[str, Any]]]:
    """List configured channels with their supported contract versions."""
    engine = request.app.state.engine
    return {
        "channels": [
            {
                "channel": channel.value,
                "ack_mode": engine.registry.ack_mode(channel).value,
                "schema_versions": engine.schema_registry.versions(channel),
            }
            for channel in engine.list_channels()
        ]
    }
