"""Unit tests for DispatchCoordinator.

Tests cover:
- Retry loop bounded by the retry policy
- Terminal failures settle after one attempt
- Synchronous settlement at send success
- Verification handoff for asynchronous channels
- Validation, bypass and configuration failures
- Adapter exceptions converted into transient failures
"""

from unittest.mock import MagicMock

import pytest
import requests

from courier.configuration import ChannelSettings
from courier.contracts import SchemaContractValidator, SchemaRegistry, builtin_contracts
from courier.enums import (
    AttemptOutcome,
    Channel,
    DeliveryStatus,
    DispatchState,
    SettlementOutcome,
)
from courier.notifications import DispatchCoordinator
from courier.notifications.channels import ChannelRegistry, HttpResponse
from courier.resilience.retry import BackoffKind, RetryPolicy, RetryPolicyEngine
from courier.verification import AsyncDeliveryVerifier
from tests.factories import EMAIL_MESSAGES_URL, JIRA_ISSUE_URL, JIRA_URL, SLACK_URL

S = DispatchState


@pytest.fixture
def coordinator_factory(channel_settings, stub_transport, timed_store, manual_clock):
    """Factory for DispatchCoordinator wired to the stub transport and manual clock.

    Example:
        coordinator = coordinator_factory(max_attempts=5, backoff_kind=BackoffKind.EXPONENTIAL)
    """

    def _factory(
        max_attempts=3,
        backoff_kind=BackoffKind.FIXED,
        base_delay=1.0,
        registry=None,
        verify_deadline=20,
    ):
        return DispatchCoordinator(
            registry=registry or ChannelRegistry(channel_settings, lambda: stub_transport),
            validator=SchemaContractValidator(SchemaRegistry(builtin_contracts())),
            retry_engine=RetryPolicyEngine(
                RetryPolicy(
                    max_attempts=max_attempts,
                    backoff_kind=backoff_kind,
                    base_delay=base_delay,
                )
            ),
            verifier=AsyncDeliveryVerifier(
                timed_store, poll_interval=2, default_deadline=20, clock=manual_clock
            ),
            clock=manual_clock,
            verify_deadline=verify_deadline,
        )

    return _factory


@pytest.mark.unit
class TestRetryBehaviour:
    def test_fixed_backoff_three_server_errors(
        self, coordinator_factory, stub_transport, timed_store, manual_clock, request_factory
    ):
        stub_transport.enqueue(SLACK_URL, HttpResponse(500), HttpResponse(500), HttpResponse(500))
        coordinator = coordinator_factory(max_attempts=3, backoff_kind=BackoffKind.FIXED)

        result = coordinator.dispatch(request_factory(Channel.SLACK))

        assert result.state == DispatchState.SETTLED
        assert result.outcome == SettlementOutcome.FAILURE
        assert result.delivery_status == DeliveryStatus.FAILED
        assert result.attempt_count == 3
        assert all(a.outcome == AttemptOutcome.FAILURE for a in result.attempts)
        assert result.error.kind == "TransientSendError"
        assert result.error.code == "SERVER_ERROR"
        assert result.delivery_record is None
        assert timed_store.reads == []
        assert manual_clock.sleeps == [1.0, 1.0]
        assert result.transitions == [
            S.CREATED, S.SENDING, S.RETRYING, S.SENDING, S.RETRYING, S.SENDING, S.SETTLED
        ]

    def test_async_channel_send_failure_skips_verification(
        self, coordinator_factory, stub_transport, timed_store, request_factory
    ):
        stub_transport.enqueue(
            JIRA_ISSUE_URL, HttpResponse(500), HttpResponse(500), HttpResponse(500)
        )

        result = coordinator_factory().dispatch(request_factory(Channel.JIRA))

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.attempt_count == 3
        assert timed_store.reads == []
        assert S.AWAITING_VERIFICATION not in result.transitions

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
    def test_terminal_failure_single_attempt(
        self, coordinator_factory, stub_transport, manual_clock, request_factory, status_code
    ):
        stub_transport.enqueue(SLACK_URL, HttpResponse(status_code))

        result = coordinator_factory(max_attempts=5).dispatch(request_factory(Channel.SLACK))

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.attempt_count == 1
        assert result.error.kind == "TerminalSendError"
        assert result.error.retryable is False
        assert result.attempts[0].http_status == status_code
        assert manual_clock.sleeps == []
        assert len(stub_transport.calls) == 1

    def test_recovers_after_transient_failure(
        self, coordinator_factory, stub_transport, request_factory
    ):
        stub_transport.enqueue(
            SLACK_URL,
            requests.exceptions.ConnectionError("reset"),
            HttpResponse(200, text="ok"),
        )

        result = coordinator_factory().dispatch(request_factory(Channel.SLACK))

        assert result.outcome == SettlementOutcome.SUCCESS
        assert [a.outcome for a in result.attempts] == [
            AttemptOutcome.FAILURE,
            AttemptOutcome.SUCCESS,
        ]
        assert result.attempts[0].error_detail.code == "CONNECTION_ERROR"
        assert result.attempts[1].error_detail is None

    def test_exponential_backoff_between_attempts(
        self, coordinator_factory, stub_transport, manual_clock, request_factory
    ):
        stub_transport.enqueue(
            SLACK_URL, HttpResponse(503), HttpResponse(503), HttpResponse(503), HttpResponse(200)
        )
        coordinator = coordinator_factory(
            max_attempts=4, backoff_kind=BackoffKind.EXPONENTIAL, base_delay=0.5
        )

        result = coordinator.dispatch(request_factory(Channel.SLACK))

        assert result.is_success
        assert manual_clock.sleeps == [0.5, 1.0, 2.0]

    def test_retry_after_extends_backoff(
        self, coordinator_factory, stub_transport, manual_clock, request_factory
    ):
        stub_transport.enqueue(
            SLACK_URL, HttpResponse(429, headers={"Retry-After": "7"}), HttpResponse(200)
        )

        result = coordinator_factory().dispatch(request_factory(Channel.SLACK))

        assert result.is_success
        assert manual_clock.sleeps == [7]

    @pytest.mark.parametrize("max_attempts", [1, 2, 3, 5])
    def test_attempts_never_exceed_max_attempts(
        self, coordinator_factory, stub_transport, request_factory, max_attempts
    ):
        stub_transport.enqueue(SLACK_URL, *[HttpResponse(502)] * 10)

        result = coordinator_factory(max_attempts=max_attempts).dispatch(
            request_factory(Channel.SLACK)
        )

        assert result.attempt_count == max_attempts
        assert len(stub_transport.calls) == max_attempts

    def test_attempts_are_strictly_ordered(
        self, coordinator_factory, stub_transport, request_factory
    ):
        stub_transport.enqueue(SLACK_URL, HttpResponse(500), HttpResponse(500), HttpResponse(200))

        result = coordinator_factory().dispatch(request_factory(Channel.SLACK))

        assert [a.attempt_number for a in result.attempts] == [1, 2, 3]
        for earlier, later in zip(result.attempts, result.attempts[1:]):
            assert earlier.completed_at <= later.started_at

    def test_adapter_exception_becomes_transient_failure(
        self, coordinator_factory, request_factory
    ):
        adapter = MagicMock()
        adapter.send.side_effect = RuntimeError("boom")
        registry = MagicMock()
        registry.create.return_value = adapter

        result = coordinator_factory(registry=registry).dispatch(request_factory(Channel.SLACK))

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.attempt_count == 3
        assert result.error.code == "CHANNEL_EXCEPTION"
        assert result.error.kind == "TransientSendError"
        adapter.__exit__.assert_called_once()


@pytest.mark.unit
class TestSettlement:
    def test_sync_success_settles_delivered(
        self, coordinator_factory, timed_store, request_factory
    ):
        result = coordinator_factory().dispatch(request_factory(Channel.SLACK))

        assert result.outcome == SettlementOutcome.SUCCESS
        assert result.delivery_status == DeliveryStatus.DELIVERED
        assert result.delivery_record is None
        assert result.error is None
        assert result.transitions == [S.CREATED, S.SENDING, S.SUCCEEDED, S.SETTLED]
        assert timed_store.reads == []

    def test_async_delivered_after_three_poll_cycles(
        self, coordinator_factory, stub_transport, timed_store, json_response, request_factory
    ):
        stub_transport.enqueue(JIRA_ISSUE_URL, json_response(201, {"key": "OPS-7"}))
        timed_store.publish_at("OPS-7", 6, "delivered")

        result = coordinator_factory().dispatch(request_factory(Channel.JIRA))

        assert result.outcome == SettlementOutcome.SUCCESS
        assert result.delivery_status == DeliveryStatus.DELIVERED
        assert result.delivery_record.status == DeliveryStatus.DELIVERED
        assert result.delivery_record.trace_id == "OPS-7"
        assert result.elapsed_seconds <= 8
        assert result.transitions == [
            S.CREATED, S.SENDING, S.SUCCEEDED, S.AWAITING_VERIFICATION, S.SETTLED
        ]

    def test_async_never_confirmed_times_out(
        self, coordinator_factory, stub_transport, json_response, request_factory
    ):
        stub_transport.enqueue(JIRA_ISSUE_URL, json_response(201, {"key": "OPS-7"}))

        result = coordinator_factory(verify_deadline=20).dispatch(request_factory(Channel.JIRA))

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.delivery_status == DeliveryStatus.TIMED_OUT
        assert result.error.kind == "VerificationTimeoutError"
        assert result.elapsed_seconds == 20

    def test_async_negative_acknowledgement(
        self, coordinator_factory, stub_transport, timed_store, json_response, request_factory
    ):
        stub_transport.enqueue(
            EMAIL_MESSAGES_URL, json_response(202, {"id": "msg_1"})
        )
        timed_store.publish_at("msg_1", 2, "bounced")

        result = coordinator_factory().dispatch(request_factory(Channel.EMAIL))

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.delivery_status == DeliveryStatus.FAILED
        assert result.error.kind == "DeliveryFailedError"
        assert "bounced" in result.error.message

    def test_malformed_acceptance_is_terminal(
        self, coordinator_factory, stub_transport, timed_store, json_response, request_factory
    ):
        stub_transport.enqueue(JIRA_ISSUE_URL, json_response(201, {"self": "https://jira"}))

        result = coordinator_factory().dispatch(request_factory(Channel.JIRA))

        assert result.attempt_count == 1
        assert result.error.kind == "TerminalSendError"
        assert result.error.code == "MALFORMED_RESPONSE"
        assert timed_store.reads == []


@pytest.mark.unit
class TestPreSendFailures:
    def test_schema_violation_never_reaches_adapter(
        self, coordinator_factory, stub_transport, request_factory
    ):
        result = coordinator_factory().dispatch(
            request_factory(Channel.JIRA, payload={"description": "no summary"})
        )

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.error.kind == "SchemaViolationError"
        assert result.validation.valid is False
        assert result.validation.violations[0].path == "/summary"
        assert result.attempts == []
        assert result.transitions == [S.CREATED, S.SETTLED]
        assert stub_transport.calls == []

    def test_bypass_dispatches_invalid_payload(
        self, coordinator_factory, stub_transport, request_factory
    ):
        result = coordinator_factory().dispatch(
            request_factory(Channel.SLACK, payload={}, skip_schema_validation=True)
        )

        assert result.outcome == SettlementOutcome.SUCCESS
        assert result.validation.bypassed is True
        assert len(stub_transport.calls) == 1

    def test_missing_contract_version_is_configuration_error(
        self, coordinator_factory, stub_transport, request_factory
    ):
        result = coordinator_factory().dispatch(
            request_factory(Channel.SLACK, schema_version="9")
        )

        assert result.outcome == SettlementOutcome.FAILURE
        assert result.error.kind == "ConfigurationError"
        assert result.error.code == "MISSING_CONTRACT"
        assert result.error.retryable is False
        assert result.validation is None
        assert stub_transport.calls == []

    def test_unconfigured_channel_is_configuration_error(
        self, coordinator_factory, stub_transport, request_factory
    ):
        registry = ChannelRegistry(
            ChannelSettings(slack_webhook_url=None, jira_base_url=JIRA_URL),
            lambda: stub_transport,
        )

        result = coordinator_factory(registry=registry).dispatch(
            request_factory(Channel.SLACK)
        )

        assert result.error.kind == "ConfigurationError"
        assert result.error.code == "CHANNEL_NOT_CONFIGURED"
        assert result.attempts == []
        assert result.validation.valid is True
