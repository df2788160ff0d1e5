"""Test data factories for deterministic test data generation."""

from tests.factories.notifications import (
    DEFAULT_PAYLOADS,
    EMAIL_MESSAGES_URL,
    EMAIL_URL,
    JIRA_ISSUE_URL,
    JIRA_URL,
    S3_URL,
    SEND_URLS,
    SERVICENOW_INCIDENT_URL,
    SERVICENOW_URL,
    SLACK_URL,
    WEBHOOK_URL,
    make_request,
)
from tests.factories.timing import ManualClock, TimedStatusStore

__all__ = [
    "DEFAULT_PAYLOADS",
    "EMAIL_MESSAGES_URL",
    "EMAIL_URL",
    "JIRA_ISSUE_URL",
    "JIRA_URL",
    "ManualClock",
    "S3_URL",
    "SEND_URLS",
    "SERVICENOW_INCIDENT_URL",
    "SERVICENOW_URL",
    "SLACK_URL",
    "TimedStatusStore",
    "WEBHOOK_URL",
    "make_request",
]
