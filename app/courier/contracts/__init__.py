"""Versioned schema contracts and payload validation.

Usage:
    from courier.contracts import (
        SchemaContractValidator,
        SchemaRegistry,
        builtin_contracts,
    )

    validator = SchemaContractValidator(SchemaRegistry(builtin_contracts()))
    result = validator.validate(Channel.JIRA, None, payload)
"""

from courier.contracts.builtin import builtin_contracts
from courier.contracts.models import ContractModel, ValidationResult, Violation
from courier.contracts.registry import SchemaContract, SchemaRegistry, parse_version
from courier.contracts.validator import (
    SchemaContractValidator,
    payload_location,
    to_json_pointer,
)

__all__ = [
    "ContractModel",
    "SchemaContract",
    "SchemaContractValidator",
    "SchemaRegistry",
    "ValidationResult",
    "Violation",
    "builtin_contracts",
    "parse_version",
    "payload_location",
    "to_json_pointer",
]
