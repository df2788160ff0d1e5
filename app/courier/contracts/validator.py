"""Schema contract validator.

Validates outbound payloads against the versioned contract resolved from
the SchemaRegistry and reports each problem as a JSON-pointer path plus a
readable reason.
"""

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from courier.contracts.models import ValidationResult, Violation
from courier.contracts.registry import SchemaRegistry
from courier.enums import Channel
from courier.logging import get_module_logger

logger = get_module_logger()

_REASONS = {
    "missing": "missing required field",
    "extra_forbidden": "unexpected field",
}


def to_json_pointer(location: Iterable[Union[str, int]]) -> str:
    """Render a pydantic error location as an RFC 6901 JSON pointer."""
    parts = []
    for segment in location:
        token = str(segment).replace("~", "~0").replace("/", "~1")
        parts.append(token)
    return "".join(f"/{part}" for part in parts)


def payload_location(
    payload: Any, location: Sequence[Union[str, int]], error_type: str = ""
) -> Tuple[Union[str, int], ...]:
    """Trim an error location to the segments that exist in the payload.

    pydantic adds union member tags (``str``, ``dict[str,any]``, model
    names) to error locations. Those are not payload keys, so the location
    is cut at the first segment the payload does not contain. A missing
    field keeps its final key, since the key is the violation.
    """
    kept: List[Union[str, int]] = []
    node = payload
    for index, segment in enumerate(location):
        if isinstance(node, Mapping) and isinstance(segment, str):
            if segment in node:
                node = node[segment]
                kept.append(segment)
                continue
            if error_type == "missing" and index == len(location) - 1:
                kept.append(segment)
            break
        if (
            isinstance(node, list)
            and isinstance(segment, int)
            and not isinstance(segment, bool)
            and 0 <= segment < len(node)
        ):
            node = node[segment]
            kept.append(segment)
            continue
        break
    return tuple(kept)


class SchemaContractValidator:
    """Structural payload validation against versioned contracts.

    The validator is stateless apart from its read-only registry and is
    shared by every concurrent dispatch.

    Example:
        validator = SchemaContractValidator(registry)
        result = validator.validate(Channel.SLACK, "2", {"text": "deployed"})
        if not result.valid:
            for violation in result.violations:
                print(violation.path, violation.reason)
    """

    def __init__(self, registry: SchemaRegistry):
        self.registry = registry

    def validate(
        self,
        channel: Channel,
        version: Optional[str],
        payload: Mapping[str, Any],
        bypass: bool = False,
    ) -> ValidationResult:
        """Validate a payload.

        Validation runs in strict JSON mode, so a payload only passes when
        its JSON form matches the contract's published JSON Schema: "2" is
        not an integer and true is not a number.

        Args:
            channel: Target channel
            version: Contract version, or None for the latest
            payload: JSON-compatible payload
            bypass: Skip validation entirely. The skip is logged.

        Returns:
            ValidationResult with violations (empty when valid)

        Raises:
            ConfigurationError: If no contract matches (channel, version)
        """
        if bypass:
            logger.warning(
                "schema_validation_bypassed",
                channel=channel.value,
                requested_version=version,
            )
            return ValidationResult.skipped()

        contract = self.registry.resolve(channel, version)

        try:
            document = json.dumps(payload)
        except (TypeError, ValueError) as e:
            violations = [Violation(path="", reason=f"payload is not JSON-compatible: {e}")]
            return self._failed(channel, contract.version, violations)

        try:
            contract.model.model_validate_json(document, strict=True)
        except ValidationError as e:
            return self._failed(channel, contract.version, self._violations_from(e, payload))

        logger.debug(
            "schema_validation_passed",
            channel=channel.value,
            contract_version=contract.version,
        )
        return ValidationResult(valid=True, contract_version=contract.version)

    @staticmethod
    def _failed(
        channel: Channel, contract_version: str, violations: List[Violation]
    ) -> ValidationResult:
        logger.info(
            "schema_validation_failed",
            channel=channel.value,
            contract_version=contract_version,
            violation_count=len(violations),
            violations=[f"{v.path}: {v.reason}" for v in violations],
        )
        return ValidationResult(
            valid=False,
            violations=violations,
            contract_version=contract_version,
        )

    @staticmethod
    def _violations_from(error: ValidationError, payload: Any) -> List[Violation]:
        reasons: Dict[str, List[str]] = {}
        for detail in error.errors():
            error_type = detail.get("type", "")
            reason = _REASONS.get(error_type, detail.get("msg", "invalid"))
            location = payload_location(payload, detail.get("loc", ()), error_type)
            path_reasons = reasons.setdefault(to_json_pointer(location), [])
            if reason not in path_reasons:
                path_reasons.append(reason)

        # Union members fail separately at the same path
        return [
            Violation(path=path, reason="; ".join(path_reasons))
            for path, path_reasons in reasons.items()
        ]
