"""Email channel adapter.

Submits messages to a transactional email HTTP API. The API queues the
message and returns its id; bounces and deliveries are reported later
through the delivery-status store.
"""

from typing import Any, Dict, Optional

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.notifications.channels.base import ChannelAdapter
from courier.notifications.channels.transport import HttpResponse, OutboundRequest
from courier.notifications.models import NotificationRequest


class EmailChannel(ChannelAdapter):
    """Email API adapter (asynchronous acknowledgement)."""

    channel = Channel.EMAIL
    ack_mode = AckMode.ASYNCHRONOUS

    @classmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        return settings.email_api_url

    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        payload = request.payload
        body: Dict[str, Any] = {
            "from": self._settings.email_from_address,
            "to": list(payload.get("to", [])),
            "subject": payload.get("subject", ""),
            "text": payload.get("body", ""),
            "reference": request.id,
        }
        if payload.get("cc"):
            body["cc"] = list(payload["cc"])
        if payload.get("html_body"):
            body["html"] = payload["html_body"]

        headers = self.default_headers(request)
        if self._settings.email_api_key:
            headers["Authorization"] = f"Bearer {self._settings.email_api_key}"

        return OutboundRequest(
            method="POST",
            url=f"{self.endpoint}/v1/messages",
            headers=headers,
            body=body,
        )

    def parse_acceptance(self, response: HttpResponse) -> Optional[str]:
        return response.json().get("id")
