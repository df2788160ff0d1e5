"""Jira channel adapter.

Creates an issue through the Jira REST API. Jira acknowledges the create
call with the new issue key; whether the ticket reached its assignee is
confirmed later through the delivery-status store, keyed by that issue
key.
"""

from typing import Any, Dict, Optional

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.notifications.channels.base import ChannelAdapter, basic_auth_header
from courier.notifications.channels.transport import HttpResponse, OutboundRequest
from courier.notifications.models import NotificationRequest


class JiraChannel(ChannelAdapter):
    """Jira issue-creation adapter (asynchronous acknowledgement)."""

    channel = Channel.JIRA
    ack_mode = AckMode.ASYNCHRONOUS

    @classmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        return settings.jira_base_url

    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        payload = request.payload
        fields: Dict[str, Any] = {
            "project": {
                "key": payload.get("project_key") or self._settings.jira_project_key
            },
            "summary": payload.get("summary", ""),
            "issuetype": {"name": payload.get("issue_type") or "Task"},
        }
        if payload.get("description"):
            fields["description"] = payload["description"]
        if payload.get("labels"):
            fields["labels"] = list(payload["labels"])

        headers = self.default_headers(request)
        if self._settings.jira_user_email and self._settings.jira_api_token:
            headers["Authorization"] = basic_auth_header(
                self._settings.jira_user_email, self._settings.jira_api_token
            )

        return OutboundRequest(
            method="POST",
            url=f"{self.endpoint}/rest/api/2/issue",
            headers=headers,
            body={"fields": fields},
        )

    def parse_acceptance(self, response: HttpResponse) -> Optional[str]:
        return response.json().get("key")
