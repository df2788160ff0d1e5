"""Shared fixtures for courier tests."""

from typing import Any, Dict, Optional

import pytest

from courier.configuration import ChannelSettings, DispatchSettings, Settings
from courier.logging import configure_logging
from courier.notifications import Channel, build_engine
from courier.notifications.channels import HttpResponse, StubTransport
from tests.factories import (
    EMAIL_URL,
    JIRA_URL,
    S3_URL,
    SERVICENOW_URL,
    SLACK_URL,
    WEBHOOK_URL,
    ManualClock,
    TimedStatusStore,
    make_request,
)


@pytest.fixture(scope="session", autouse=True)
def configured_logging():
    """Configure (suppressed) logging once for the test session."""
    configure_logging(log_level="DEBUG")


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def timed_store(manual_clock):
    return TimedStatusStore(manual_clock)


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def channel_settings():
    """ChannelSettings with every channel configured."""
    return ChannelSettings(
        slack_webhook_url=SLACK_URL,
        jira_base_url=JIRA_URL,
        jira_user_email="bot@example.com",
        jira_api_token="jira-token",
        jira_project_key="OPS",
        email_api_url=EMAIL_URL,
        email_api_key="email-key",
        email_from_address="alerts@example.com",
        webhook_url=WEBHOOK_URL,
        webhook_secret="webhook-secret",
        s3_bucket_url=S3_URL,
        s3_access_token="s3-token",
        servicenow_instance_url=SERVICENOW_URL,
        servicenow_username="snow-user",
        servicenow_password="snow-pass",
    )


@pytest.fixture
def dispatch_settings_factory():
    """Factory for DispatchSettings with fast, deterministic defaults.

    Example:
        settings = dispatch_settings_factory(max_attempts=5, backoff_kind="exponential")
    """

    def _factory(**overrides: Any) -> DispatchSettings:
        values: Dict[str, Any] = {
            "max_attempts": 3,
            "backoff_kind": "fixed",
            "base_delay_seconds": 1.0,
            "max_delay_seconds": None,
            "jitter": False,
            "poll_interval_seconds": 2.0,
            "verify_deadline_seconds": 20.0,
            "max_workers": 4,
            "request_timeout_seconds": 5.0,
            "idempotency_ttl_seconds": 3600,
        }
        values.update(overrides)
        return DispatchSettings(**values)

    return _factory


@pytest.fixture
def settings_factory(channel_settings, dispatch_settings_factory):
    """Factory for test-environment Settings.

    Example:
        settings = settings_factory(max_attempts=1)
        settings = settings_factory(channels=ChannelSettings())
    """

    def _factory(channels: Optional[ChannelSettings] = None, **dispatch: Any) -> Settings:
        return Settings(
            ENVIRONMENT="test",
            LOG_LEVEL="DEBUG",
            dispatch=dispatch_settings_factory(**dispatch),
            channels=channels if channels is not None else channel_settings,
        )

    return _factory


@pytest.fixture
def request_factory():
    """Factory for NotificationRequest instances with unique ids.

    Example:
        request = request_factory(Channel.JIRA)
        bypassed = request_factory(Channel.SLACK, payload={}, skip_schema_validation=True)
    """
    counter = {"value": 0}

    def _factory(channel: Channel = Channel.SLACK, id: Optional[str] = None, **kwargs: Any):
        counter["value"] += 1
        return make_request(channel, id=id or f"n-{counter['value']}", **kwargs)

    return _factory


@pytest.fixture
def json_response():
    """Build an HttpResponse with a JSON body."""

    def _factory(
        status_code: int = 200,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> HttpResponse:
        return HttpResponse.from_json(
            status_code, {"ok": True} if body is None else body, headers
        )

    return _factory


@pytest.fixture
def engine_factory(settings_factory, stub_transport, timed_store, manual_clock):
    """Factory for a NotificationEngine wired to the stub transport,
    the timed store and the manual clock.

    Example:
        engine = engine_factory(max_attempts=1)
    """

    def _factory(channels: Optional[ChannelSettings] = None, **dispatch: Any):
        return build_engine(
            settings_factory(channels=channels, **dispatch),
            transport=stub_transport,
            store=timed_store,
            clock=manual_clock,
        )

    return _factory
