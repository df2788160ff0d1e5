"""HTTP transport used by channel adapters.

Adapters shape an OutboundRequest; the transport performs the network
call and returns an HttpResponse, raising TransportError when no response
was received at all.

- RequestsTransport: real HTTP via a requests Session. One instance per
  adapter, and adapters are created per dispatch, so sessions are never
  shared between worker threads.
- StubTransport: scripted responses for the test environment.
"""

import json
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Protocol, Union

import requests

from courier.logging import get_module_logger

logger = get_module_logger()


class TransportError(Exception):
    """Raised when the request could not be completed (no HTTP response).

    Attributes:
        cause: The underlying requests exception, if any
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


@dataclass
class OutboundRequest:
    """HTTP-style call shaped by a channel adapter.

    Attributes:
        method: HTTP method
        url: Target URL
        headers: Request headers
        body: JSON-compatible body, or raw str/bytes when encode_json is False
        encode_json: Send body as JSON (sets Content-Type)
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    encode_json: bool = True


@dataclass
class HttpResponse:
    """Minimal HTTP response consumed by adapters."""

    status_code: int
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.text)

    @property
    def body(self) -> Any:
        """Parsed JSON body, falling back to raw text."""
        if not self.text:
            return None
        try:
            return self.json()
        except ValueError:
            return self.text

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @classmethod
    def from_json(
        cls, status_code: int, body: Any, headers: Optional[Dict[str, str]] = None
    ) -> "HttpResponse":
        return cls(
            status_code=status_code,
            text=json.dumps(body),
            headers=headers or {"Content-Type": "application/json"},
        )


class HttpTransport(Protocol):
    """Performs the network call for an OutboundRequest."""

    def send(self, outbound: OutboundRequest) -> HttpResponse:
        ...

    def close(self) -> None:
        ...


class RequestsTransport:
    """HttpTransport backed by a requests Session.

    Args:
        timeout: Per-request timeout in seconds
        session: Optional pre-configured Session (tests, connection tuning)
    """

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session or requests.Session()

    def send(self, outbound: OutboundRequest) -> HttpResponse:
        kwargs: Dict[str, Any] = {
            "headers": outbound.headers,
            "timeout": self.timeout,
        }
        if outbound.body is not None:
            if outbound.encode_json:
                kwargs["json"] = outbound.body
            else:
                kwargs["data"] = outbound.body

        try:
            response = self._session.request(outbound.method, outbound.url, **kwargs)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{type(e).__name__}: {e}", cause=e) from e

        return HttpResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        self._session.close()


ScriptedResponse = Union[HttpResponse, Exception]


class StubTransport:
    """Scripted, thread-safe transport for tests and the test environment.

    Responses queued for a URL are returned in order; once a URL's queue
    is empty the default response is returned. Exceptions in the queue
    are raised (wrapped in TransportError unless they already are one).

    Example:
        transport = StubTransport()
        transport.enqueue(url, HttpResponse(500), HttpResponse(500), HttpResponse(200))
    """

    def __init__(self, default: Optional[HttpResponse] = None):
        self.default = default or HttpResponse.from_json(200, {"ok": True})
        self.calls: List[OutboundRequest] = []
        self._scripts: Dict[str, Deque[ScriptedResponse]] = {}
        self._lock = threading.Lock()

    def enqueue(self, url: str, *responses: ScriptedResponse) -> None:
        with self._lock:
            self._scripts.setdefault(url, deque()).extend(responses)

    def send(self, outbound: OutboundRequest) -> HttpResponse:
        with self._lock:
            self.calls.append(outbound)
            script = self._scripts.get(outbound.url)
            scripted = script.popleft() if script else self.default

        logger.debug("stub_transport_call", method=outbound.method, url=outbound.url)

        if isinstance(scripted, TransportError):
            raise scripted
        if isinstance(scripted, Exception):
            raise TransportError(str(scripted), cause=scripted)
        return scripted

    def calls_to(self, url: str) -> List[OutboundRequest]:
        with self._lock:
            return [call for call in self.calls if call.url == url]

    def close(self) -> None:
        pass
