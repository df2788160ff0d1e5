"""Unit tests for the HTTP API."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from courier.api import create_app
from courier.api.rate_limits import client_key, get_limiter
from courier.configuration import ChannelSettings
from courier.enums import Channel
from courier.notifications.channels import HttpResponse
from tests.factories import DEFAULT_PAYLOADS, SLACK_URL


@pytest.fixture
def client_factory(engine_factory):
    def _factory(**kwargs):
        get_limiter().reset()
        return TestClient(create_app(engine_factory(**kwargs), app_version="1.2.3"))

    return _factory


@pytest.mark.unit
class TestSystemRoutes:
    def test_version(self, client_factory):
        response = client_factory().get("/version")

        assert response.status_code == 200
        assert response.json() == {"version": "1.2.3"}

    def test_health_ok(self, client_factory):
        client = client_factory(channels=ChannelSettings(slack_webhook_url=SLACK_URL))

        response = client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "ok"
        assert body["channels"]["slack"]["healthy"] is True
        assert body["channels"]["jira"]["status"] == "not_configured"


@pytest.mark.unit
class TestNotificationRoutes:
    def test_submit_returns_dispatch_result(self, client_factory):
        client = client_factory()

        response = client.post(
            "/api/v1/notifications",
            json={"id": "api-1", "channel": "slack", "payload": DEFAULT_PAYLOADS[Channel.SLACK]},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["notification_id"] == "api-1"
        assert body["outcome"] == "success"
        assert body["delivery_status"] == "delivered"
        assert len(body["attempts"]) == 1

    def test_delivery_failure_is_reported_in_body(self, client_factory, stub_transport):
        stub_transport.enqueue(SLACK_URL, HttpResponse(404))
        client = client_factory()

        response = client.post(
            "/api/v1/notifications",
            json={"id": "api-2", "channel": "slack", "payload": DEFAULT_PAYLOADS[Channel.SLACK]},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["outcome"] == "failure"
        assert body["error"]["kind"] == "TerminalSendError"

    def test_schema_violation_is_reported_in_body(self, client_factory, stub_transport):
        client = client_factory()

        response = client.post(
            "/api/v1/notifications",
            json={"id": "api-3", "channel": "slack", "payload": {}},
        )

        assert response.status_code == 200
        assert response.json()["error"]["kind"] == "SchemaViolationError"
        assert stub_transport.calls == []

    @pytest.mark.parametrize(
        "body",
        [
            {"channel": "slack", "payload": {}},
            {"id": "x", "channel": "pager", "payload": {}},
            {"id": "", "channel": "slack", "payload": {}},
        ],
    )
    def test_malformed_request_is_rejected(self, client_factory, body):
        response = client_factory().post("/api/v1/notifications", json=body)

        assert response.status_code == 422

    def test_list_channels(self, client_factory):
        client = client_factory(channels=ChannelSettings(slack_webhook_url=SLACK_URL))

        response = client.get("/api/v1/channels")

        assert response.status_code == 200
        assert response.json() == {
            "channels": [
                {
                    "channel": "slack",
                    "ack_mode": "synchronous",
                    "schema_versions": ["1", "2"],
                }
            ]
        }


@pytest.mark.unit
class TestRateLimits:
    def test_read_limit_returns_429(self, client_factory):
        client = client_factory()
        headers = {"X-Forwarded-For": "203.0.113.7"}

        statuses = [client.get("/version", headers=headers).status_code for _ in range(51)]

        assert statuses[:50] == [200] * 50
        assert statuses[50] == 429
        assert client.get("/version", headers=headers).json()["message"] == (
            "Rate limit exceeded"
        )

    def test_limits_are_keyed_by_forwarded_client(self, client_factory):
        client = client_factory()
        for _ in range(50):
            client.get("/version", headers={"X-Forwarded-For": "203.0.113.7"})

        response = client.get(
            "/version", headers={"X-Forwarded-For": "198.51.100.2, 10.0.0.1"}
        )

        assert response.status_code == 200

    def test_client_key_prefers_first_forwarded_hop(self):
        request = MagicMock()
        request.headers = {"X-Forwarded-For": "198.51.100.2, 10.0.0.1"}

        assert client_key(request) == "198.51.100.2"
