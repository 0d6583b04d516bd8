"""Validation types shared across all validators."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class ValidationSeverity(str, Enum):
    """Severity level of a validation violation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationViolation(BaseModel):
    """A single rule violation detected during validation."""

    rule_id: str  # e.g., "S.1", "P.2"
    category: str  # e.g., "State Consistency", "Phase Order"
    message: str  # Human-readable description
    severity: ValidationSeverity = ValidationSeverity.ERROR
    context: Optional[dict] = None  # Additional context for debugging


def errors_only(violations: list[ValidationViolation]) -> list[ValidationViolation]:
    """Filter violations down to ERROR severity."""
    return [v for v in violations if v.severity == ValidationSeverity.ERROR]
