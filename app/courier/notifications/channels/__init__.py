"""Channel adapters and the HTTP transport they send through."""

from courier.notifications.channels.base import ChannelAdapter
from courier.notifications.channels.email import EmailChannel
from courier.notifications.channels.jira import JiraChannel
from courier.notifications.channels.registry import (
    DEFAULT_ADAPTERS,
    ChannelRegistry,
)
from courier.notifications.channels.s3 import S3Channel
from courier.notifications.channels.servicenow import ServiceNowChannel
from courier.notifications.channels.slack import SlackChannel
from courier.notifications.channels.transport import (
    HttpResponse,
    HttpTransport,
    OutboundRequest,
    RequestsTransport,
    StubTransport,
    TransportError,
)
from courier.notifications.channels.webhook import WebhookChannel

__all__ = [
    "ChannelAdapter",
    "ChannelRegistry",
    "DEFAULT_ADAPTERS",
    "EmailChannel",
    "HttpResponse",
    "HttpTransport",
    "JiraChannel",
    "OutboundRequest",
    "RequestsTransport",
    "S3Channel",
    "ServiceNowChannel",
    "SlackChannel",
    "StubTransport",
    "TransportError",
    "WebhookChannel",
]
