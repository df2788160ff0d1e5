"""ServiceNow channel adapter.

Opens an incident through the Table API. The response carries the
record sys_id, which is the trace id used to confirm the incident was
routed.
"""

from typing import Any, Dict, Optional

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.notifications.channels.base import ChannelAdapter, basic_auth_header
from courier.notifications.channels.transport import HttpResponse, OutboundRequest
from courier.notifications.models import NotificationRequest

INCIDENT_FIELDS = ("description", "assignment_group", "caller_id")


class ServiceNowChannel(ChannelAdapter):
    """ServiceNow incident adapter (asynchronous acknowledgement)."""

    channel = Channel.SERVICENOW
    ack_mode = AckMode.ASYNCHRONOUS

    @classmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        return settings.servicenow_instance_url

    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        payload = request.payload
        body: Dict[str, Any] = {
            "short_description": payload.get("short_description", ""),
            "urgency": str(payload.get("urgency", 3)),
            "impact": str(payload.get("impact", 3)),
            "correlation_id": request.id,
        }
        for key in INCIDENT_FIELDS:
            if payload.get(key):
                body[key] = payload[key]

        headers = self.default_headers(request)
        if self._settings.servicenow_username and self._settings.servicenow_password:
            headers["Authorization"] = basic_auth_header(
                self._settings.servicenow_username, self._settings.servicenow_password
            )

        return OutboundRequest(
            method="POST",
            url=f"{self.endpoint}/api/now/table/incident",
            headers=headers,
            body=body,
        )

    def parse_acceptance(self, response: HttpResponse) -> Optional[str]:
        return response.json()["result"]["sys_id"]
