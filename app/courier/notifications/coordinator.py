"""Dispatch coordinator.

Drives a single NotificationRequest through its lifecycle:

1. Validate the payload against its schema contract (or log the bypass)
2. Create a fresh channel adapter
3. Send, retrying transient failures per the retry policy
4. For asynchronous channels, hand the acceptance to the verifier
5. Settle into a DispatchResult

Every failure is reported inside the DispatchResult; dispatch() never
raises for delivery problems.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from courier.clock import Clock, SystemClock
from courier.contracts import SchemaContractValidator, ValidationResult
from courier.enums import (
    AttemptOutcome,
    DeliveryStatus,
    DispatchState,
    SettlementOutcome,
)
from courier.errors import (
    ConfigurationError,
    CourierError,
    DeliveryFailedError,
    SchemaViolationError,
    TerminalSendError,
    TransientSendError,
    VerificationTimeoutError,
)
from courier.logging import bind_dispatch_context, get_module_logger
from courier.notifications.channels import ChannelAdapter, ChannelRegistry
from courier.notifications.models import (
    DeliveryRecord,
    DispatchAttempt,
    DispatchResult,
    ErrorDetail,
    NotificationRequest,
    SendResult,
)
from courier.notifications.state import DispatchStateMachine
from courier.operations import OperationStatus
from courier.resilience.retry import RetryPolicyEngine
from courier.verification import AsyncDeliveryVerifier

logger = get_module_logger()


def error_from_send_result(result: SendResult) -> CourierError:
    """Build the error reported for a failed send."""
    if result.is_retryable:
        return TransientSendError(result.message, code=result.error_code)
    return TerminalSendError(result.message, code=result.error_code)


class DispatchCoordinator:
    """Runs the per-request dispatch lifecycle.

    The coordinator holds only read-only collaborators and can serve
    many requests concurrently; all per-request state lives in locals.

    Args:
        registry: Builds channel adapters
        validator: Schema contract validator
        retry_engine: Retry decisions and backoff delays
        verifier: Async delivery verifier
        clock: Time source for attempt timestamps and backoff sleeps
        verify_deadline: Verification deadline, None for the verifier default
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        validator: SchemaContractValidator,
        retry_engine: RetryPolicyEngine,
        verifier: AsyncDeliveryVerifier,
        clock: Optional[Clock] = None,
        verify_deadline: Optional[float] = None,
    ):
        self.registry = registry
        self.validator = validator
        self.retry_engine = retry_engine
        self.verifier = verifier
        self.clock = clock or SystemClock()
        self.verify_deadline = verify_deadline

    def dispatch(self, request: NotificationRequest) -> DispatchResult:
        """Dispatch a request and return its settled result.

        Args:
            request: NotificationRequest to deliver

        Returns:
            DispatchResult in state SETTLED
        """
        started = self.clock.monotonic()
        machine = DispatchStateMachine(request.id)

        with bind_dispatch_context(
            notification_id=request.id,
            channel=request.channel.value,
            owner=request.metadata.owner,
        ):
            logger.info(
                "dispatch_started",
                schema_version=request.schema_version,
                tags=request.metadata.tags,
            )

            try:
                validation = self.validator.validate(
                    request.channel,
                    request.schema_version,
                    request.payload,
                    bypass=request.metadata.skip_schema_validation,
                )
            except ConfigurationError as e:
                return self._settle_unsent(request, machine, e, None, started)

            if not validation.valid:
                error = SchemaViolationError.from_violations(validation.violations)
                return self._settle_unsent(request, machine, error, validation, started)

            try:
                adapter = self.registry.create(request.channel)
            except ConfigurationError as e:
                return self._settle_unsent(request, machine, e, validation, started)

            with adapter:
                send_result, attempts = self._send_with_retry(adapter, request, machine)

                if not send_result.success:
                    error = error_from_send_result(send_result)
                    machine.advance(DispatchState.SETTLED)
                    return self._settle(
                        request,
                        machine,
                        SettlementOutcome.FAILURE,
                        DeliveryStatus.FAILED,
                        started,
                        attempts=attempts,
                        validation=validation,
                        error=error,
                    )

                if not adapter.is_asynchronous:
                    machine.advance(DispatchState.SETTLED)
                    return self._settle(
                        request,
                        machine,
                        SettlementOutcome.SUCCESS,
                        DeliveryStatus.DELIVERED,
                        started,
                        attempts=attempts,
                        validation=validation,
                    )

            machine.advance(DispatchState.AWAITING_VERIFICATION)
            record = self.verifier.verify(
                request.id,
                deadline=self.verify_deadline,
                trace_id=send_result.external_id,
            )
            machine.advance(DispatchState.SETTLED)
            return self._settle_verified(
                request, machine, record, attempts, validation, started
            )

    def _send_with_retry(
        self,
        adapter: ChannelAdapter,
        request: NotificationRequest,
        machine: DispatchStateMachine,
    ) -> Tuple[SendResult, List[DispatchAttempt]]:
        attempts: List[DispatchAttempt] = []
        attempt_number = 0

        while True:
            attempt_number += 1
            machine.advance(DispatchState.SENDING)
            started_at = self.clock.now()
            result = self._safe_send(adapter, request)
            attempts.append(
                self._record_attempt(attempt_number, started_at, self.clock.now(), result)
            )

            if result.success:
                machine.advance(DispatchState.SUCCEEDED)
                logger.info(
                    "dispatch_attempt_succeeded",
                    attempt=attempt_number,
                    http_status=result.http_status,
                    external_id=result.external_id,
                )
                return result, attempts

            if not self.retry_engine.should_retry(attempt_number, result.status):
                logger.warning(
                    "dispatch_attempt_failed",
                    attempt=attempt_number,
                    http_status=result.http_status,
                    error_code=result.error_code,
                    retryable=result.is_retryable,
                    final=True,
                )
                return result, attempts

            delay = max(
                self.retry_engine.next_delay(attempt_number), result.retry_after or 0
            )
            machine.advance(DispatchState.RETRYING)
            logger.warning(
                "dispatch_retry_scheduled",
                attempt=attempt_number,
                http_status=result.http_status,
                error_code=result.error_code,
                delay_seconds=delay,
            )
            self.clock.sleep(delay)

    def _safe_send(
        self, adapter: ChannelAdapter, request: NotificationRequest
    ) -> SendResult:
        try:
            return adapter.send(request)
        except Exception as e:
            logger.exception(
                "channel_adapter_exception",
                adapter=type(adapter).__name__,
                error=str(e),
            )
            return SendResult(
                success=False,
                status=OperationStatus.TRANSIENT_ERROR,
                message=f"Unexpected error in channel adapter: {str(e)}",
                error_code="CHANNEL_EXCEPTION",
            )

    @staticmethod
    def _record_attempt(
        attempt_number: int,
        started_at: datetime,
        completed_at: datetime,
        result: SendResult,
    ) -> DispatchAttempt:
        error_detail = None
        if not result.success:
            error_detail = ErrorDetail.from_exception(error_from_send_result(result))
        return DispatchAttempt(
            attempt_number=attempt_number,
            started_at=started_at,
            completed_at=completed_at,
            outcome=AttemptOutcome.SUCCESS if result.success else AttemptOutcome.FAILURE,
            http_status=result.http_status,
            error_detail=error_detail,
        )

    def _settle_verified(
        self,
        request: NotificationRequest,
        machine: DispatchStateMachine,
        record: DeliveryRecord,
        attempts: List[DispatchAttempt],
        validation: ValidationResult,
        started: float,
    ) -> DispatchResult:
        if record.status == DeliveryStatus.DELIVERED:
            return self._settle(
                request,
                machine,
                SettlementOutcome.SUCCESS,
                record.status,
                started,
                attempts=attempts,
                validation=validation,
                record=record,
            )

        if record.status == DeliveryStatus.FAILED:
            error: CourierError = DeliveryFailedError(
                f"Delivery reported as {record.detail or 'failed'}"
            )
        else:
            error = VerificationTimeoutError(
                f"No delivery confirmation after {record.polls} polls"
            )
        return self._settle(
            request,
            machine,
            SettlementOutcome.FAILURE,
            record.status,
            started,
            attempts=attempts,
            validation=validation,
            record=record,
            error=error,
        )

    def _settle_unsent(
        self,
        request: NotificationRequest,
        machine: DispatchStateMachine,
        error: CourierError,
        validation: Optional[ValidationResult],
        started: float,
    ) -> DispatchResult:
        machine.advance(DispatchState.SETTLED)
        return self._settle(
            request,
            machine,
            SettlementOutcome.FAILURE,
            DeliveryStatus.FAILED,
            started,
            validation=validation,
            error=error,
        )

    def _settle(
        self,
        request: NotificationRequest,
        machine: DispatchStateMachine,
        outcome: SettlementOutcome,
        delivery_status: DeliveryStatus,
        started: float,
        attempts: Optional[List[DispatchAttempt]] = None,
        validation: Optional[ValidationResult] = None,
        record: Optional[DeliveryRecord] = None,
        error: Optional[CourierError] = None,
    ) -> DispatchResult:
        result = DispatchResult(
            notification_id=request.id,
            channel=request.channel,
            state=machine.state,
            outcome=outcome,
            delivery_status=delivery_status,
            attempts=attempts or [],
            delivery_record=record,
            validation=validation,
            error=ErrorDetail.from_exception(error) if error else None,
            transitions=list(machine.history),
            elapsed_seconds=self.clock.monotonic() - started,
        )

        log = logger.info if result.is_success else logger.warning
        log(
            "dispatch_settled",
            outcome=outcome.value,
            delivery_status=delivery_status.value,
            attempts=result.attempt_count,
            error_kind=result.error.kind if result.error else None,
            error_code=result.error.code if result.error else None,
            elapsed_seconds=result.elapsed_seconds,
        )
        return result
