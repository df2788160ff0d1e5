"""Notification engine facade.

The NotificationEngine is the inbound entry point: it deduplicates
concurrent submits of the same request, reuses settled results from the
idempotency cache, and runs batches on a worker pool. build_engine()
wires every component from an explicit Settings object.

Usage Example:
    from courier.configuration import Settings
    from courier.notifications import NotificationRequest, Channel, build_engine

    engine = build_engine(Settings())
    result = engine.submit(
        NotificationRequest(
            id="deploy-42",
            channel=Channel.SLACK,
            payload={"text": "Deploy finished"},
        )
    )
    if not result.is_success:
        logger.warning("notification_failed", error=result.error)
"""

import random
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from courier.clock import Clock, SystemClock
from courier.configuration import Settings
from courier.contracts import SchemaContractValidator, SchemaRegistry, builtin_contracts
from courier.enums import Channel
from courier.errors import ConfigurationError
from courier.idempotency import IdempotencyCache, InMemoryIdempotencyCache
from courier.logging import configure_logging, get_module_logger
from courier.notifications.channels import (
    ChannelRegistry,
    HttpTransport,
    RequestsTransport,
    StubTransport,
)
from courier.notifications.coordinator import DispatchCoordinator
from courier.notifications.inflight import InFlightRegistry
from courier.notifications.models import DispatchResult, NotificationRequest
from courier.resilience.retry import RetryPolicyEngine
from courier.verification import (
    AsyncDeliveryVerifier,
    DeliveryStatusStore,
    InMemoryDeliveryStatusStore,
)

logger = get_module_logger()


class NotificationEngine:
    """Submit facade over the dispatch coordinator.

    Attributes:
        coordinator: Runs individual dispatches
        registry: Channel adapter registry
        schema_registry: Registered schema contracts
        idempotency_cache: Optional cache of settled results
        idempotency_ttl_seconds: TTL for cached results
        max_workers: Worker threads used by submit_many
    """

    def __init__(
        self,
        coordinator: DispatchCoordinator,
        registry: ChannelRegistry,
        schema_registry: SchemaRegistry,
        idempotency_cache: Optional[IdempotencyCache] = None,
        idempotency_ttl_seconds: int = 3600,
        max_workers: int = 4,
    ):
        self.coordinator = coordinator
        self.registry = registry
        self.schema_registry = schema_registry
        self.idempotency_cache = idempotency_cache
        self.idempotency_ttl_seconds = idempotency_ttl_seconds
        self.max_workers = max_workers
        self._inflight = InFlightRegistry()

        logger.info(
            "initialized_notification_engine",
            channels=[channel.value for channel in registry.available_channels()],
            idempotency_enabled=idempotency_cache is not None,
            max_workers=max_workers,
        )

    @property
    def delivery_store(self) -> DeliveryStatusStore:
        return self.coordinator.verifier.store

    def submit(self, request: NotificationRequest) -> DispatchResult:
        """Dispatch a request and return its settled result.

        A request id that is already being dispatched is not sent again;
        the caller waits for and receives the running dispatch's result.
        A request id settled within the idempotency TTL returns the cached
        result.

        Args:
            request: NotificationRequest to deliver

        Returns:
            DispatchResult in state SETTLED
        """
        cached = self._cached_result(request.id)
        if cached is not None:
            return cached

        future, owner = self._inflight.claim(request.id)
        if not owner:
            logger.info("dispatch_already_in_flight", notification_id=request.id)
            return future.result()

        # A dispatch for this id may have settled between the cache check and the claim
        cached = self._cached_result(request.id)
        if cached is not None:
            self._inflight.complete(request.id, cached)
            return cached

        try:
            result = self.coordinator.dispatch(request)
        except Exception as e:
            self._inflight.fail(request.id, e)
            raise

        self._cache_result(result)
        self._inflight.complete(request.id, result)
        return result

    def submit_many(self, requests: Iterable[NotificationRequest]) -> List[DispatchResult]:
        """Dispatch requests in parallel on a worker pool.

        Args:
            requests: NotificationRequests to deliver

        Returns:
            DispatchResults in the same order as the requests
        """
        requests = list(requests)
        if not requests:
            return []

        logger.info(
            "dispatch_batch_started",
            request_count=len(requests),
            max_workers=self.max_workers,
        )
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="courier-dispatch"
        ) as executor:
            results = list(executor.map(self.submit, requests))

        logger.info(
            "dispatch_batch_completed",
            request_count=len(results),
            success_count=sum(1 for r in results if r.is_success),
        )
        return results

    def list_channels(self) -> List[Channel]:
        return self.registry.available_channels()

    def validate_bindings(self) -> List[Channel]:
        """Check every configured channel has a schema contract.

        Returns:
            Channels that are configured and bound

        Raises:
            ConfigurationError: If a configured channel has no contract
        """
        channels = self.registry.available_channels()
        for channel in channels:
            if not self.schema_registry.has_channel(channel):
                raise ConfigurationError(
                    f"No schema contract registered for channel {channel.value}",
                    code="MISSING_CONTRACT",
                )

        if not channels:
            logger.warning("no_channels_configured")
        else:
            logger.info(
                "channel_bindings_validated",
                channels=[channel.value for channel in channels],
            )
        return channels

    def health_check(self) -> Dict[str, Dict[str, Any]]:
        """Report configuration health for every known channel."""
        report: Dict[str, Dict[str, Any]] = {}
        for channel in Channel:
            if not self.registry.is_available(channel):
                report[channel.value] = {
                    "healthy": False,
                    "status": "not_configured",
                    "message": f"Channel {channel.value} is not configured",
                }
                continue

            with self.registry.create(channel) as adapter:
                result = adapter.health_check()
            report[channel.value] = {
                "healthy": result.is_success,
                "status": result.status.value,
                "message": result.message,
                "ack_mode": adapter.ack_mode.value,
            }
        return report

    def _cached_result(self, key: str) -> Optional[DispatchResult]:
        if self.idempotency_cache is None:
            return None

        cached = self.idempotency_cache.get(key)
        if cached is None:
            return None

        try:
            result = DispatchResult.model_validate(cached)
        except ValidationError as e:
            logger.warning("idempotency_cache_entry_invalid", key=key, error=str(e))
            return None

        logger.info(
            "dispatch_result_from_cache",
            notification_id=key,
            outcome=result.outcome.value,
        )
        return result

    def _cache_result(self, result: DispatchResult) -> None:
        if self.idempotency_cache is None:
            return
        self.idempotency_cache.set(
            result.notification_id,
            result.model_dump(mode="json"),
            ttl_seconds=self.idempotency_ttl_seconds,
        )


def build_engine(
    settings: Settings,
    transport: Optional[HttpTransport] = None,
    store: Optional[DeliveryStatusStore] = None,
    clock: Optional[Clock] = None,
    schema_registry: Optional[SchemaRegistry] = None,
    idempotency_cache: Optional[IdempotencyCache] = None,
    rng: Optional[random.Random] = None,
) -> NotificationEngine:
    """Wire a NotificationEngine from settings.

    Configures logging, builds every component, and validates channel
    bindings so configuration problems fail at startup.

    Args:
        settings: Settings instance
        transport: Transport shared by all adapters. Defaults to a
            StubTransport in the test environment and a RequestsTransport
            per adapter otherwise.
        store: Delivery-status store read by the verifier
        clock: Time source for backoff, verification and the cache
        schema_registry: Contracts to validate against (built-ins by default)
        idempotency_cache: Result cache (in-memory by default, disabled
            when COURIER_IDEMPOTENCY_TTL_SECONDS is 0)
        rng: Random source for retry jitter

    Raises:
        ConfigurationError: If a configured channel has no schema contract
    """
    configure_logging(
        log_level=settings.LOG_LEVEL,
        is_production=settings.is_production,
        app_version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    dispatch = settings.dispatch
    clock = clock or SystemClock()

    if transport is None and settings.is_test:
        transport = StubTransport()
    if transport is not None:
        shared = transport

        def transport_factory() -> HttpTransport:
            return shared

    else:

        def transport_factory() -> HttpTransport:
            return RequestsTransport(timeout=dispatch.request_timeout_seconds)

    schema_registry = schema_registry or SchemaRegistry(builtin_contracts())
    registry = ChannelRegistry(settings.channels, transport_factory)
    verifier = AsyncDeliveryVerifier(
        store if store is not None else InMemoryDeliveryStatusStore(),
        poll_interval=dispatch.poll_interval_seconds,
        default_deadline=dispatch.verify_deadline_seconds,
        clock=clock,
    )
    coordinator = DispatchCoordinator(
        registry=registry,
        validator=SchemaContractValidator(schema_registry),
        retry_engine=RetryPolicyEngine(dispatch.retry_policy(), rng=rng),
        verifier=verifier,
        clock=clock,
    )

    if idempotency_cache is None and dispatch.idempotency_ttl_seconds > 0:
        idempotency_cache = InMemoryIdempotencyCache(clock=clock)

    engine = NotificationEngine(
        coordinator=coordinator,
        registry=registry,
        schema_registry=schema_registry,
        idempotency_cache=idempotency_cache,
        idempotency_ttl_seconds=dispatch.idempotency_ttl_seconds,
        max_workers=dispatch.max_workers,
    )
    engine.validate_bindings()
    return engine
