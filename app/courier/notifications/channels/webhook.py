"""Generic webhook channel adapter.

Posts a JSON event envelope to a configured URL. When a signing secret is
configured the exact bytes sent are signed with HMAC-SHA256 and the
digest is carried in the X-Courier-Signature header, so receivers can
verify the body before parsing it.
"""

import hashlib
import hmac
import json
from datetime import datetime, timezone
from typing import Optional

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.notifications.channels.base import ChannelAdapter
from courier.notifications.channels.transport import OutboundRequest
from courier.notifications.models import NotificationRequest

SIGNATURE_HEADER = "X-Courier-Signature"


def sign_body(secret: str, body: str) -> str:
    digest = hmac.new(
        secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"sha256={digest}"


class WebhookChannel(ChannelAdapter):
    """Webhook adapter with optional HMAC signing."""

    channel = Channel.WEBHOOK
    ack_mode = AckMode.SYNCHRONOUS

    @classmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        return settings.webhook_url

    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        payload = request.payload
        envelope = {
            "id": request.id,
            "event": payload.get("event"),
            "data": payload.get("data", {}),
            "occurred_at": payload.get("occurred_at"),
            "sent_at": datetime.now(timezone.utc).isoformat(),
        }
        body = json.dumps(envelope, separators=(",", ":"), sort_keys=True)

        headers = self.default_headers(request)
        headers["Content-Type"] = "application/json"
        if self._settings.webhook_secret:
            headers[SIGNATURE_HEADER] = sign_body(self._settings.webhook_secret, body)

        return OutboundRequest(
            method="POST",
            url=self.endpoint,
            headers=headers,
            body=body,
            encode_json=False,
        )
