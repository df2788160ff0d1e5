"""Unit tests for the HTTP transports."""

from unittest.mock import MagicMock

import pytest
import requests

from courier.notifications.channels import (
    HttpResponse,
    OutboundRequest,
    RequestsTransport,
    StubTransport,
    TransportError,
)


@pytest.mark.unit
class TestHttpResponse:
    def test_body_parses_json(self):
        response = HttpResponse.from_json(201, {"key": "OPS-1"})

        assert response.body == {"key": "OPS-1"}
        assert response.json()["key"] == "OPS-1"

    def test_body_falls_back_to_text(self):
        assert HttpResponse(200, text="ok").body == "ok"

    def test_empty_body(self):
        assert HttpResponse(204).body is None

    def test_header_lookup_is_case_insensitive(self):
        response = HttpResponse(429, headers={"Retry-After": "5"})

        assert response.header("retry-after") == "5"
        assert response.header("X-Missing") is None


@pytest.mark.unit
class TestRequestsTransport:
    def test_sends_json_body(self):
        session = MagicMock()
        session.request.return_value = MagicMock(
            status_code=200, text='{"ok": true}', headers={"Content-Type": "application/json"}
        )
        transport = RequestsTransport(timeout=3.0, session=session)

        response = transport.send(
            OutboundRequest("POST", "https://x.test", {"X-Correlation-ID": "n-1"}, {"a": 1})
        )

        session.request.assert_called_once_with(
            "POST",
            "https://x.test",
            headers={"X-Correlation-ID": "n-1"},
            timeout=3.0,
            json={"a": 1},
        )
        assert response.status_code == 200
        assert response.body == {"ok": True}

    def test_sends_raw_body(self):
        session = MagicMock()
        session.request.return_value = MagicMock(status_code=200, text="", headers={})
        transport = RequestsTransport(session=session)

        transport.send(OutboundRequest("PUT", "https://x.test/k", {}, b"data", encode_json=False))

        assert session.request.call_args.kwargs["data"] == b"data"
        assert "json" not in session.request.call_args.kwargs

    def test_wraps_requests_exceptions(self):
        session = MagicMock()
        cause = requests.exceptions.ConnectTimeout("slow")
        session.request.side_effect = cause
        transport = RequestsTransport(session=session)

        with pytest.raises(TransportError) as exc_info:
            transport.send(OutboundRequest("POST", "https://x.test"))

        assert exc_info.value.cause is cause

    def test_close_closes_session(self):
        session = MagicMock()

        RequestsTransport(session=session).close()

        session.close.assert_called_once()


@pytest.mark.unit
class TestStubTransport:
    def test_default_response(self):
        transport = StubTransport()

        response = transport.send(OutboundRequest("POST", "https://x.test"))

        assert response.status_code == 200
        assert len(transport.calls) == 1

    def test_scripted_responses_in_order(self):
        transport = StubTransport()
        transport.enqueue("https://x.test", HttpResponse(500), HttpResponse(201))

        statuses = [
            transport.send(OutboundRequest("POST", "https://x.test")).status_code
            for _ in range(3)
        ]

        assert statuses == [500, 201, 200]

    def test_scripted_exception_is_wrapped(self):
        transport = StubTransport()
        cause = requests.exceptions.ConnectionError("reset")
        transport.enqueue("https://x.test", cause)

        with pytest.raises(TransportError) as exc_info:
            transport.send(OutboundRequest("POST", "https://x.test"))

        assert exc_info.value.cause is cause

    def test_calls_to_filters_by_url(self):
        transport = StubTransport()
        transport.send(OutboundRequest("POST", "https://a.test"))
        transport.send(OutboundRequest("POST", "https://b.test"))

        assert [c.url for c in transport.calls_to("https://b.test")] == ["https://b.test"]
