"""Channel adapter abstract base class.

All channel implementations (Slack, Jira, Email, Webhook, S3, ServiceNow)
implement this interface. Subclasses only shape the platform request and,
for asynchronous channels, read the acceptance id; sending, failure
classification and logging live here.
"""

import base64
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.logging import get_module_logger
from courier.notifications.channels.transport import (
    HttpResponse,
    HttpTransport,
    OutboundRequest,
    TransportError,
)
from courier.notifications.models import NotificationRequest, SendResult
from courier.operations import (
    OperationResult,
    classify_http_status,
    classify_transport_error,
)

logger = get_module_logger()


def basic_auth_header(username: str, secret: str) -> str:
    token = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class ChannelAdapter(ABC):
    """Abstract base class for channel adapters.

    Each adapter delivers through one platform. Adapters are created per
    dispatch with their own transport and closed afterwards, so they hold
    no state shared between worker threads.

    Contract:
        send() never raises. Network errors, non-2xx responses and
        malformed acceptance bodies all come back as SendResult with
        success=False and a classified status.

    Example Implementation:
        class ChatOpsChannel(ChannelAdapter):
            channel = Channel.SLACK

            @classmethod
            def configured_endpoint(cls, settings):
                return settings.slack_webhook_url

            def build_request(self, request):
                return OutboundRequest(
                    "POST", self.endpoint, self.default_headers(request),
                    {"text": request.payload.get("text", "")},
                )
    """

    channel: Channel
    ack_mode: AckMode = AckMode.SYNCHRONOUS

    def __init__(self, settings: ChannelSettings, transport: HttpTransport):
        self._settings = settings
        self._transport = transport

    @classmethod
    @abstractmethod
    def configured_endpoint(cls, settings: ChannelSettings) -> Optional[str]:
        """Base URL for the channel, or None when the channel is not configured."""
        pass

    @abstractmethod
    def build_request(self, request: NotificationRequest) -> OutboundRequest:
        """Shape the platform call for a request.

        Must tolerate payloads that skipped contract validation: read
        optional keys with defaults rather than indexing.
        """
        pass

    def parse_acceptance(self, response: HttpResponse) -> Optional[str]:
        """Acceptance id for asynchronous channels (trace id for verification)."""
        return None

    @classmethod
    def is_configured_for(cls, settings: ChannelSettings) -> bool:
        return bool(cls.configured_endpoint(settings))

    @property
    def endpoint(self) -> str:
        return (self.configured_endpoint(self._settings) or "").rstrip("/")

    @property
    def is_asynchronous(self) -> bool:
        return self.ack_mode == AckMode.ASYNCHRONOUS

    def default_headers(self, request: NotificationRequest) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "X-Correlation-ID": request.id,
        }

    def send(self, request: NotificationRequest) -> SendResult:
        """Send a request through the platform.

        Args:
            request: NotificationRequest to deliver

        Returns:
            SendResult; success=True means delivered (sync channels) or
            accepted with an acceptance id (async channels)
        """
        if not self.is_configured_for(self._settings):
            return SendResult.from_operation(
                OperationResult.not_configured(self.channel.value)
            )

        try:
            outbound = self.build_request(request)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(
                "channel_request_shaping_failed",
                channel=self.channel.value,
                notification_id=request.id,
                error=str(e),
            )
            return SendResult.from_operation(
                OperationResult.permanent_error(
                    f"Could not build {self.channel.value} request: {e}",
                    error_code="INVALID_PAYLOAD",
                )
            )

        try:
            response = self._transport.send(outbound)
        except TransportError as e:
            classified = classify_transport_error(e)
            logger.warning(
                "channel_transport_error",
                channel=self.channel.value,
                notification_id=request.id,
                error=str(e),
                error_code=classified.error_code,
            )
            return SendResult.from_operation(classified)

        classified = classify_http_status(
            response.status_code, response.header("Retry-After")
        )
        body = response.body

        if not classified.is_success:
            logger.warning(
                "channel_send_rejected",
                channel=self.channel.value,
                notification_id=request.id,
                http_status=response.status_code,
                error_code=classified.error_code,
                retryable=classified.is_retryable,
            )
            return SendResult.from_operation(
                classified, http_status=response.status_code, body=body
            )

        external_id = None
        if self.is_asynchronous:
            external_id = self._safe_parse_acceptance(response)
            if not external_id:
                logger.error(
                    "channel_acceptance_malformed",
                    channel=self.channel.value,
                    notification_id=request.id,
                    http_status=response.status_code,
                )
                # Already accepted by the platform; resending would duplicate it
                return SendResult.from_operation(
                    OperationResult.permanent_error(
                        "Acceptance response did not include an id",
                        error_code="MALFORMED_RESPONSE",
                    ),
                    http_status=response.status_code,
                    body=body,
                )

        logger.info(
            "channel_send_succeeded",
            channel=self.channel.value,
            notification_id=request.id,
            http_status=response.status_code,
            external_id=external_id,
            ack_mode=self.ack_mode.value,
        )
        return SendResult.from_operation(
            classified,
            http_status=response.status_code,
            body=body,
            external_id=external_id,
        )

    def health_check(self) -> OperationResult:
        """Report whether the channel has an endpoint configured."""
        if not self.is_configured_for(self._settings):
            return OperationResult.not_configured(self.channel.value)
        return OperationResult.success(
            message=f"Channel {self.channel.value} configured",
            data={"endpoint": self.endpoint, "ack_mode": self.ack_mode.value},
        )

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "ChannelAdapter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _safe_parse_acceptance(self, response: HttpResponse) -> Optional[str]:
        try:
            external_id = self.parse_acceptance(response)
        except (ValueError, KeyError, TypeError, AttributeError):
            return None
        return str(external_id) if external_id else None
