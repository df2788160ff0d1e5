"""Unit tests for HTTP status and transport error classification."""

import pytest
import requests

from courier.notifications.channels.transport import TransportError
from courier.operations import (
    OperationStatus,
    classify_http_status,
    classify_transport_error,
)
from courier.operations.classifiers import DEFAULT_RETRY_AFTER_SECONDS


@pytest.mark.unit
class TestClassifyHttpStatus:
    @pytest.mark.parametrize("status_code", [200, 201, 202, 204])
    def test_2xx_is_success(self, status_code):
        assert classify_http_status(status_code).is_success

    @pytest.mark.parametrize("status_code", [500, 502, 503, 504])
    def test_5xx_is_transient(self, status_code):
        result = classify_http_status(status_code)

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "SERVER_ERROR"

    def test_408_is_transient(self):
        assert classify_http_status(408).status == OperationStatus.TRANSIENT_ERROR

    def test_429_honours_retry_after(self):
        result = classify_http_status(429, retry_after="17")

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "RATE_LIMITED"
        assert result.retry_after == 17

    @pytest.mark.parametrize("header", [None, "", "Wed, 21 Oct 2015 07:28:00 GMT"])
    def test_429_without_usable_retry_after_uses_default(self, header):
        assert classify_http_status(429, retry_after=header).retry_after == (
            DEFAULT_RETRY_AFTER_SECONDS
        )

    @pytest.mark.parametrize(
        "status_code,expected",
        [
            (401, OperationStatus.UNAUTHORIZED),
            (403, OperationStatus.UNAUTHORIZED),
            (404, OperationStatus.NOT_FOUND),
            (400, OperationStatus.PERMANENT_ERROR),
            (409, OperationStatus.PERMANENT_ERROR),
            (410, OperationStatus.PERMANENT_ERROR),
            (422, OperationStatus.PERMANENT_ERROR),
        ],
    )
    def test_4xx_is_terminal(self, status_code, expected):
        result = classify_http_status(status_code)

        assert result.status == expected
        assert result.is_retryable is False

    @pytest.mark.parametrize("status_code", [400, 422])
    def test_malformed_payload_code(self, status_code):
        assert classify_http_status(status_code).error_code == "INVALID_PAYLOAD"

    def test_unexpected_status_is_permanent(self):
        result = classify_http_status(302)

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "UNEXPECTED_STATUS"


@pytest.mark.unit
class TestClassifyTransportError:
    def test_timeout_is_transient(self):
        exc = TransportError("timed out", cause=requests.exceptions.ReadTimeout("slow"))

        result = classify_transport_error(exc)

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "TIMEOUT"

    def test_connection_error_is_transient(self):
        exc = TransportError(
            "refused", cause=requests.exceptions.ConnectionError("refused")
        )

        result = classify_transport_error(exc)

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"

    @pytest.mark.parametrize(
        "cause",
        [
            requests.exceptions.MissingSchema("no scheme"),
            requests.exceptions.InvalidURL("bad url"),
            requests.exceptions.InvalidSchema("ftp"),
            requests.exceptions.InvalidHeader("bad header"),
        ],
    )
    def test_unsendable_request_is_permanent(self, cause):
        result = classify_transport_error(TransportError("bad", cause=cause))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "INVALID_REQUEST"

    def test_raw_requests_exception_without_wrapper(self):
        result = classify_transport_error(requests.exceptions.ConnectTimeout("slow"))

        assert result.error_code == "TIMEOUT"

    def test_transport_error_without_cause_is_transient(self):
        result = classify_transport_error(TransportError("socket closed"))

        assert result.status == OperationStatus.TRANSIENT_ERROR


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [201, 404, 429, 503])
def test_classified_result_carries_http_status(status_code):
    assert classify_http_status(status_code).http_status == status_code
