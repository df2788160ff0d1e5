"""Slack channel adapter.

Posts messages to a Slack incoming webhook. Slack answers the webhook
call synchronously, so a 2xx response means the message was delivered.
"""

from typing import Any, Dict, Optional

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.notifications.channels.base import ChannelAdapter
from courier.notifications.channels.transport import OutboundRequest
from courier.notifications.models import NotificationRequest

OPTIONAL_FIELDS = ("blocks", "channel", "username", "thread_ts")


class SlackChannel(ChannelAdapter):
    """Slack incoming-webhook adapter."""

    channel = Channel.SLACK
    ack_mode = AckMode.SYNCHRONOUS

    @classmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        return settings.slack_webhook_url

    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        payload = request.payload
        body: Dict[str, Any] = {"text": payload.get("text", "")}
        for key in OPTIONAL_FIELDS:
            if payload.get(key):
                body[key] = payload[key]

        return OutboundRequest(
            method="POST",
            url=self.endpoint,
            headers=self.default_headers(request),
            body=body,
        )
