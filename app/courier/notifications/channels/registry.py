"""Channel adapter registry.

Maps each Channel to the adapter class that serves it and builds a fresh
adapter, with its own transport, for every dispatch.
"""

from typing import Callable, Dict, List, Optional, Type

from courier.configuration import ChannelSettings
from courier.enums import AckMode, Channel
from courier.errors import ConfigurationError
from courier.logging import get_module_logger
from courier.notifications.channels.base import ChannelAdapter
from courier.notifications.channels.email import EmailChannel
from courier.notifications.channels.jira import JiraChannel
from courier.notifications.channels.s3 import S3Channel
from courier.notifications.channels.servicenow import ServiceNowChannel
from courier.notifications.channels.slack import SlackChannel
from courier.notifications.channels.transport import HttpTransport
from courier.notifications.channels.webhook import WebhookChannel

logger = get_module_logger()

TransportFactory = Callable[[], HttpTransport]

DEFAULT_ADAPTERS: Dict[Channel, Type[ChannelAdapter]] = {
    Channel.SLACK: SlackChannel,
    Channel.JIRA: JiraChannel,
    Channel.EMAIL: EmailChannel,
    Channel.WEBHOOK: WebhookChannel,
    Channel.S3: S3Channel,
    Channel.SERVICENOW: ServiceNowChannel,
}


class ChannelRegistry:
    """Builds channel adapters on demand.

    Only channels that are both registered and configured (endpoint set)
    can be created.

    Args:
        settings: Channel endpoints and credentials
        transport_factory: Returns a new HttpTransport per adapter
        adapters: Channel → adapter class map (defaults to all built-ins)
    """

    def __init__(
        self,
        settings: ChannelSettings,
        transport_factory: TransportFactory,
        adapters: Optional[Dict[Channel, Type[ChannelAdapter]]] = None,
    ):
        self._settings = settings
        self._transport_factory = transport_factory
        self._adapters: Dict[Channel, Type[ChannelAdapter]] = dict(
            DEFAULT_ADAPTERS if adapters is None else adapters
        )

    def register(self, channel: Channel, adapter_cls: Type[ChannelAdapter]) -> None:
        self._adapters[channel] = adapter_cls
        logger.debug(
            "channel_adapter_registered",
            channel=channel.value,
            adapter=adapter_cls.__name__,
        )

    def is_available(self, channel: Channel) -> bool:
        adapter_cls = self._adapters.get(channel)
        return adapter_cls is not None and adapter_cls.is_configured_for(self._settings)

    def available_channels(self) -> List[Channel]:
        return [channel for channel in self._adapters if self.is_available(channel)]

    def ack_mode(self, channel: Channel) -> AckMode:
        return self._adapter_class(channel).ack_mode

    def create(self, channel: Channel) -> ChannelAdapter:
        """Create an adapter for a channel.

        Raises:
            ConfigurationError: If no adapter is registered or the channel
                has no endpoint configured
        """
        adapter_cls = self._adapter_class(channel)
        if not adapter_cls.is_configured_for(self._settings):
            raise ConfigurationError(
                f"Channel {channel.value} has no endpoint configured",
                code="CHANNEL_NOT_CONFIGURED",
            )
        return adapter_cls(self._settings, self._transport_factory())

    def _adapter_class(self, channel: Channel) -> Type[ChannelAdapter]:
        adapter_cls = self._adapters.get(channel)
        if adapter_cls is None:
            raise ConfigurationError(
                f"No adapter registered for channel {channel.value}",
                code="MISSING_ADAPTER",
            )
        return adapter_cls
