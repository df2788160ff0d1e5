"""Built-in payload contracts for every supported channel.

Contract fields mirror the request shaping done by the channel adapters:
an adapter can assume any payload that passed its contract has the keys
it reads.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import EmailStr, Field

from courier.contracts.models import ContractModel
from courier.contracts.registry import SchemaContract
from courier.enums import Channel


class SlackMessageV1(ContractModel):
    """Slack incoming-webhook message."""

    text: str = Field(..., min_length=1, max_length=40000)
    channel: Optional[str] = None
    username: Optional[str] = None


class SlackMessageV2(SlackMessageV1):
    """Slack message with Block Kit blocks and threading."""

    blocks: List[Dict[str, Any]] = Field(default_factory=list, max_length=50)
    thread_ts: Optional[str] = None


class JiraIssueV1(ContractModel):
    """Jira issue creation request."""

    summary: str = Field(..., min_length=1, max_length=255)
    project_key: Optional[str] = Field(default=None, pattern=r"^[A-Z][A-Z0-9_]+$")
    issue_type: str = "Task"
    description: Optional[str] = None
    labels: List[str] = Field(default_factory=list)


class EmailMessageV1(ContractModel):
    """Transactional email message."""

    to: List[EmailStr] = Field(..., min_length=1)
    subject: str = Field(..., min_length=1, max_length=998)
    body: str = Field(..., min_length=1)
    cc: List[EmailStr] = Field(default_factory=list)
    html_body: Optional[str] = None


class WebhookEventV1(ContractModel):
    """Generic outbound webhook event."""

    event: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: Optional[datetime] = None


class S3ObjectV1(ContractModel):
    """Object written to a storage bucket."""

    key: str = Field(..., min_length=1, max_length=1024)
    content: Union[str, Dict[str, Any], List[Any]]
    content_type: str = "application/json"


class ServiceNowIncidentV1(ContractModel):
    """ServiceNow incident record."""

    short_description: str = Field(..., min_length=1, max_length=160)
    description: Optional[str] = None
    urgency: int = Field(default=3, ge=1, le=3)
    impact: int = Field(default=3, ge=1, le=3)
    assignment_group: Optional[str] = None
    caller_id: Optional[str] = None


def builtin_contracts() -> List[SchemaContract]:
    """Contracts registered by default in a new engine."""
    return [
        SchemaContract(Channel.SLACK, "1", SlackMessageV1),
        SchemaContract(Channel.SLACK, "2", SlackMessageV2),
        SchemaContract(Channel.JIRA, "1", JiraIssueV1),
        SchemaContract(Channel.EMAIL, "1", EmailMessageV1),
        SchemaContract(Channel.WEBHOOK, "1", WebhookEventV1),
        SchemaContract(Channel.S3, "1", S3ObjectV1),
        SchemaContract(Channel.SERVICENOW, "1", ServiceNowIncidentV1),
    ]
