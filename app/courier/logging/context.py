"""Dispatch context binding for structured logging.

Binds per-dispatch metadata (notification id, channel, trace id) to
structlog's context variables so every log entry emitted while a request
is being processed carries it. Worker threads each bind their own
context.

Usage:
    from courier.logging import bind_dispatch_context

    with bind_dispatch_context(notification_id="n-123", channel="slack"):
        logger.info("dispatch_started")
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_dispatch_context(
    notification_id: Optional[str] = None,
    channel: Optional[str] = None,
    trace_id: Optional[str] = None,
    owner: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind dispatch-scoped context to all logs within the context manager.

    Args:
        notification_id: Request correlation id. Auto-generated if not provided.
        channel: Target channel name.
        trace_id: External trace/acceptance id, if already known.
        owner: Owner recorded in the request metadata.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    context: dict[str, Any] = {}

    context["notification_id"] = notification_id or str(uuid.uuid4())

    if channel is not None:
        context["channel"] = channel

    if trace_id is not None:
        context["trace_id"] = trace_id

    if owner is not None:
        context["owner"] = owner

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_notification_id() -> Optional[str]:
    """Get the notification id bound to the current logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("notification_id")


def clear_dispatch_context() -> None:
    """Clear all dispatch-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
