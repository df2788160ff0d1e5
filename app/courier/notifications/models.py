"""Notification dispatch models.

Platform-agnostic request, attempt, and result models. Callers build a
NotificationRequest; the coordinator owns DispatchAttempts and returns a
DispatchResult once the request has settled.

Uses Pydantic BaseModel for:
- Runtime input validation (JSON-compatible payloads)
- Immutability of requests once created
- JSON round-tripping of results for the idempotency cache and the API
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from courier.contracts.models import ValidationResult
from courier.enums import (
    AckMode,
    AttemptOutcome,
    Channel,
    DeliveryStatus,
    DispatchState,
    SettlementOutcome,
)
from courier.errors import CourierError
from courier.operations import OperationResult, OperationStatus
from courier.verification.models import DeliveryRecord

__all__ = [
    "AckMode",
    "AttemptOutcome",
    "Channel",
    "DeliveryRecord",
    "DeliveryStatus",
    "DispatchAttempt",
    "DispatchResult",
    "DispatchState",
    "ErrorDetail",
    "NotificationRequest",
    "RequestMetadata",
    "SendResult",
    "SettlementOutcome",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RequestMetadata(BaseModel):
    """Structured metadata carried alongside a request.

    Attributes:
        owner: Team or person responsible for the notification
        tags: Free-form labels for log filtering
        skip_schema_validation: Explicitly bypass contract validation. The
            bypass is logged; it never happens silently.
    """

    model_config = ConfigDict(frozen=True)

    owner: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    skip_schema_validation: bool = False


class NotificationRequest(BaseModel):
    """Immutable request to deliver a notification on one channel.

    Attributes:
        id: Opaque correlation identifier, unique per logical notification
        channel: Target channel
        payload: JSON-compatible mapping shaped per the channel's contract
        schema_version: Contract version, None for the latest
        created_at: Creation time (UTC)
        metadata: RequestMetadata

    Example:
        request = NotificationRequest(
            id="deploy-2024-06-01-42",
            channel=Channel.SLACK,
            payload={"text": "Deploy finished"},
        )
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    channel: Channel
    payload: Dict[str, Any]
    schema_version: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    metadata: RequestMetadata = Field(default_factory=RequestMetadata)

    @field_validator("payload")
    @classmethod
    def validate_payload_is_json(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Ensure the payload is JSON-compatible and detach it from the caller.

        The stored payload is a deep copy rebuilt from its JSON form, so
        later changes to the dict the caller passed in cannot reach a
        request that is already being dispatched.
        """
        try:
            document = json.dumps(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"payload must be JSON-compatible: {e}") from e
        return json.loads(document)

    @field_validator("schema_version", mode="before")
    @classmethod
    def normalize_schema_version(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class SendResult(BaseModel):
    """Result of a single channel send.

    Adapters never raise to the coordinator; every failure is a SendResult
    with success=False and a classified status.

    Attributes:
        success: True when the platform accepted (or delivered) the request
        status: OperationStatus classification
        http_status: HTTP status code, None when no response was received
        body: Response body (parsed JSON or text)
        message: Human-readable summary
        error_code: Machine error code for failures
        external_id: Acceptance id returned by asynchronous channels
        retry_after: Seconds the platform asked us to wait (rate limits)
    """

    success: bool
    status: OperationStatus
    http_status: Optional[int] = None
    body: Any = None
    message: str = ""
    error_code: Optional[str] = None
    external_id: Optional[str] = None
    retry_after: Optional[int] = None

    @classmethod
    def from_operation(
        cls,
        result: OperationResult,
        http_status: Optional[int] = None,
        body: Any = None,
        external_id: Optional[str] = None,
    ) -> "SendResult":
        return cls(
            success=result.is_success,
            status=result.status,
            http_status=http_status if http_status is not None else result.http_status,
            body=body,
            message=result.message,
            error_code=result.error_code,
            external_id=external_id,
            retry_after=result.retry_after,
        )

    @property
    def is_retryable(self) -> bool:
        return self.status == OperationStatus.TRANSIENT_ERROR


class ErrorDetail(BaseModel):
    """Structured error carried by attempts and results.

    Attributes:
        kind: Error class name (TransientSendError, TerminalSendError, ...)
        code: Machine error code
        message: Human-readable message
        retryable: Whether the error class is retried by the engine
    """

    kind: str
    code: str
    message: str
    retryable: bool = False

    @classmethod
    def from_exception(cls, exc: CourierError) -> "ErrorDetail":
        return cls(
            kind=exc.kind,
            code=exc.code,
            message=exc.message,
            retryable=exc.retryable,
        )


class DispatchAttempt(BaseModel):
    """One send try for a request.

    Attributes:
        attempt_number: 1-based attempt index
        started_at: When the send began
        completed_at: When the send returned
        outcome: SUCCESS or FAILURE
        http_status: HTTP status code, if a response was received
        error_detail: Classified failure, None on success
    """

    attempt_number: int = Field(..., ge=1)
    started_at: datetime
    completed_at: datetime
    outcome: AttemptOutcome
    http_status: Optional[int] = None
    error_detail: Optional[ErrorDetail] = None


class DispatchResult(BaseModel):
    """Terminal result of a dispatch, returned to the caller.

    Attributes:
        notification_id: Id of the request
        channel: Target channel
        state: Always SETTLED once returned
        outcome: SUCCESS or FAILURE
        delivery_status: DELIVERED, FAILED or TIMED_OUT
        attempts: Ordered send attempts
        delivery_record: Verification record for async channels
        validation: Contract validation result, None if never reached
        error: Error that caused FAILURE, None on SUCCESS
        transitions: States visited, in order
        elapsed_seconds: Wall time spent in the dispatch
    """

    notification_id: str
    channel: Channel
    state: DispatchState = DispatchState.SETTLED
    outcome: SettlementOutcome
    delivery_status: DeliveryStatus
    attempts: List[DispatchAttempt] = Field(default_factory=list)
    delivery_record: Optional[DeliveryRecord] = None
    validation: Optional[ValidationResult] = None
    error: Optional[ErrorDetail] = None
    transitions: List[DispatchState] = Field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        return self.outcome == SettlementOutcome.SUCCESS

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)
