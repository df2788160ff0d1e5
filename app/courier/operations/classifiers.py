"""Error classifiers for channel responses and transport exceptions.

Converts HTTP status codes and transport-level exceptions into
standardized OperationResult objects. Centralizes the retryable vs
terminal decision so every channel adapter classifies failures the same
way.

Key Functions:
- classify_http_status(): HTTP status code → OperationResult
- classify_transport_error(): requests/transport exception → OperationResult

Usage:
    from courier.operations.classifiers import (
        classify_http_status,
        classify_transport_error,
    )

    try:
        response = transport.send(outbound)
    except TransportError as exc:
        return classify_transport_error(exc)
    return classify_http_status(response.status_code)
"""

from typing import Optional

import requests

from courier.operations.result import OperationResult

DEFAULT_RETRY_AFTER_SECONDS = 60


def _parse_retry_after(header_value: Optional[str]) -> int:
    if not header_value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(0, int(header_value))
    except (ValueError, TypeError):
        return DEFAULT_RETRY_AFTER_SECONDS


def classify_http_status(
    status_code: int, retry_after: Optional[str] = None
) -> OperationResult:
    """Classify an HTTP status code into an OperationResult.

    Status Code Mapping:
    - 2xx: SUCCESS
    - 408: Request timeout → TRANSIENT_ERROR
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Auth failure → UNAUTHORIZED
    - 404: Not found → NOT_FOUND
    - 400/422: Malformed payload → PERMANENT_ERROR (INVALID_PAYLOAD)
    - Other 4xx: Client error → PERMANENT_ERROR
    - 5xx: Server error → TRANSIENT_ERROR
    - Other: Unexpected status → PERMANENT_ERROR

    Args:
        status_code: HTTP status returned by the platform
        retry_after: Raw Retry-After header value, if any

    Returns:
        OperationResult with appropriate status, message, error_code, and
        retry_after (if applicable)
    """
    return _classify_status(status_code, retry_after).with_http_status(status_code)


def _classify_status(status_code: int, retry_after: Optional[str]) -> OperationResult:
    if 200 <= status_code < 300:
        return OperationResult.success(message=f"HTTP {status_code}")

    if status_code == 408:
        return OperationResult.transient_error(
            "Platform request timed out (408)",
            error_code="REQUEST_TIMEOUT",
        )

    if status_code == 429:
        return OperationResult.transient_error(
            "Platform rate limited",
            error_code="RATE_LIMITED",
            retry_after=_parse_retry_after(retry_after),
        )

    if status_code in (401, 403):
        return OperationResult.unauthorized(
            f"Platform rejected credentials ({status_code})",
            error_code="UNAUTHORIZED" if status_code == 401 else "FORBIDDEN",
        )

    if status_code == 404:
        return OperationResult.not_found("Platform endpoint not found (404)")

    if status_code in (400, 422):
        return OperationResult.permanent_error(
            f"Platform rejected payload ({status_code})",
            error_code="INVALID_PAYLOAD",
        )

    if 400 <= status_code < 500:
        return OperationResult.permanent_error(
            f"Platform client error ({status_code})",
            error_code="HTTP_ERROR",
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"Platform server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"Unexpected HTTP status ({status_code})",
        error_code="UNEXPECTED_STATUS",
    )


def classify_transport_error(exc: Exception) -> OperationResult:
    """Classify a transport exception into an OperationResult.

    Exceptions raised by the HTTP transport wrap the original requests
    exception in ``cause``. Timeouts and connection failures are transient;
    requests that can never be sent (bad URL, bad header) are permanent.

    Args:
        exc: TransportError or raw requests exception

    Returns:
        OperationResult with TRANSIENT_ERROR or PERMANENT_ERROR status
    """
    cause = getattr(exc, "cause", None) or exc

    if isinstance(cause, requests.exceptions.Timeout):
        return OperationResult.transient_error(
            f"Timeout: {str(cause)}",
            error_code="TIMEOUT",
        )

    if isinstance(
        cause,
        (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidHeader,
        ),
    ):
        return OperationResult.permanent_error(
            f"Invalid request: {type(cause).__name__}: {str(cause)}",
            error_code="INVALID_REQUEST",
        )

    # Connection resets, DNS failures, proxy errors, etc. are usually temporary
    return OperationResult.transient_error(
        f"Connection error: {type(cause).__name__}: {str(cause)}",
        error_code="CONNECTION_ERROR",
    )
