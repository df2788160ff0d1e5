"""Schema contract models and validation results."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContractModel(BaseModel):
    """Base class for payload contracts.

    Unknown fields are rejected so that payload drift between producer and
    contract version shows up as a violation instead of being dropped.
    """

    model_config = ConfigDict(extra="forbid")


class Violation(BaseModel):
    """A single contract violation.

    Attributes:
        path: JSON pointer to the offending value ("" is the whole payload)
        reason: Human-readable reason, e.g. "missing required field"
    """

    path: str
    reason: str


class ValidationResult(BaseModel):
    """Outcome of validating a payload against a contract.

    Attributes:
        valid: True when the payload satisfies the contract (or was bypassed)
        violations: Violations found, empty when valid
        bypassed: True when validation was explicitly skipped
        contract_version: Version of the contract that was applied
    """

    valid: bool
    violations: List[Violation] = Field(default_factory=list)
    bypassed: bool = False
    contract_version: Optional[str] = None

    @classmethod
    def skipped(cls) -> "ValidationResult":
        return cls(valid=True, bypassed=True)
