"""Versioned schema contract registry.

Contracts are registered once at startup and only read afterwards.
Lookups are keyed by (channel, version); an unspecified version resolves
to the latest registered version for the channel.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from courier.contracts.models import ContractModel
from courier.enums import Channel
from courier.errors import ConfigurationError


def parse_version(version: str) -> Tuple[int, ...]:
    """Parse a dotted numeric version ("1", "2.1") into a comparable tuple.

    Raises:
        ConfigurationError: If the version is not dotted integers
    """
    try:
        parts = tuple(int(part) for part in str(version).strip().split("."))
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid contract version: {version!r}", code="INVALID_CONTRACT_VERSION"
        ) from e
    if not parts or any(part < 0 for part in parts):
        raise ConfigurationError(
            f"Invalid contract version: {version!r}", code="INVALID_CONTRACT_VERSION"
        )
    # "1" and "1.0" are the same version
    while len(parts) > 1 and parts[-1] == 0:
        parts = parts[:-1]
    return parts


@dataclass(frozen=True)
class SchemaContract:
    """Versioned payload contract for one channel.

    Attributes:
        channel: Channel the contract applies to
        version: Dotted numeric version string
        model: ContractModel subclass describing the payload structure
    """

    channel: Channel
    version: str
    model: Type[ContractModel]

    @property
    def json_schema(self) -> Dict[str, Any]:
        """JSON Schema document for this contract."""
        schema = self.model.model_json_schema()
        schema.setdefault("$id", f"courier:{self.channel.value}:v{self.version}")
        return schema


class SchemaRegistry:
    """Read-only lookup of SchemaContract by (channel, version).

    Example:
        registry = SchemaRegistry(builtin_contracts())
        contract = registry.resolve(Channel.SLACK)          # latest
        contract = registry.resolve(Channel.SLACK, "1")     # pinned
    """

    def __init__(self, contracts: Optional[Iterable[SchemaContract]] = None):
        self._contracts: Dict[Channel, Dict[Tuple[int, ...], SchemaContract]] = {}
        for contract in contracts or []:
            self.register(contract)

    def register(self, contract: SchemaContract) -> None:
        """Register a contract.

        Raises:
            ConfigurationError: If the (channel, version) pair is already registered
        """
        key = parse_version(contract.version)
        versions = self._contracts.setdefault(contract.channel, {})
        if key in versions:
            raise ConfigurationError(
                f"Contract {contract.channel.value} v{contract.version} already registered",
                code="DUPLICATE_CONTRACT",
            )
        versions[key] = contract

    def resolve(self, channel: Channel, version: Optional[str] = None) -> SchemaContract:
        """Resolve the contract for a channel.

        Args:
            channel: Target channel
            version: Requested version, or None for the latest

        Returns:
            The matching SchemaContract

        Raises:
            ConfigurationError: If no matching contract is registered
        """
        versions = self._contracts.get(channel)
        if not versions:
            raise ConfigurationError(
                f"No schema contract registered for channel {channel.value}",
                code="MISSING_CONTRACT",
            )
        if version is None:
            return versions[max(versions)]

        contract = versions.get(parse_version(version))
        if contract is None:
            raise ConfigurationError(
                f"No schema contract {channel.value} v{version}",
                code="MISSING_CONTRACT",
            )
        return contract

    def versions(self, channel: Channel) -> List[str]:
        """Registered versions for a channel, oldest first."""
        versions = self._contracts.get(channel, {})
        return [versions[key].version for key in sorted(versions)]

    def channels(self) -> List[Channel]:
        return list(self._contracts.keys())

    def has_channel(self, channel: Channel) -> bool:
        return bool(self._contracts.get(channel))
