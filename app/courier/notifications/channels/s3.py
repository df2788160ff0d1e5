"""Object storage channel adapter.

Writes the notification as an object with a plain HTTP PUT to
``{bucket_url}/{key}``. Works with pre-authorized bucket endpoints and
S3-compatible gateways that accept a bearer token.
"""

import json
from typing import Optional
from urllib.parse import quote

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.notifications.channels.base import ChannelAdapter
from courier.notifications.channels.transport import OutboundRequest
from courier.notifications.models import NotificationRequest


class S3Channel(ChannelAdapter):
    """Bucket PUT adapter."""

    channel = Channel.S3
    ack_mode = AckMode.SYNCHRONOUS

    @classmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        return settings.s3_bucket_url

    def object_key(self, request: NotificationRequest) -> str:
        key = request.payload.get("key") or f"{request.id}.json"
        return str(key).lstrip("/")

    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        payload = request.payload
        content = payload.get("content", "")
        if not isinstance(content, str):
            content = json.dumps(content)

        headers = self.default_headers(request)
        headers["Content-Type"] = payload.get("content_type", "application/json")
        headers["x-amz-meta-notification-id"] = request.id
        if self._settings.s3_access_token:
            headers["Authorization"] = f"Bearer {self._settings.s3_access_token}"

        return OutboundRequest(
            method="PUT",
            url=f"{self.endpoint}/{quote(self.object_key(request), safe='/')}",
            headers=headers,
            body=content.encode("utf-8"),
            encode_json=False,
        )
