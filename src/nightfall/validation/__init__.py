"""Nightfall validation module.

Files:
- types.py: Shared ValidationViolation, ValidationSeverity
- exceptions.py: ValidationError, DataIntegrityError
- night_actions.py: per-role night action predicates
- state_consistency.py: S.1-S.4 post-resolution state checks
- phase_order.py: P.1-P.2 order-of-operations checks
"""

from .types import ValidationViolation, ValidationSeverity, errors_only
from .exceptions import ValidationError, DataIntegrityError

from .night_actions import (
    UTAH_CHECKING_ROLES,
    ROLE_PREDICATES,
    validate_action,
    is_retarget_blocked,
)
from .state_consistency import validate_state_consistency
from .phase_order import validate_phase_order

__all__ = [
    # Types and exceptions
    "ValidationViolation",
    "ValidationSeverity",
    "errors_only",
    "ValidationError",
    "DataIntegrityError",
    # Night actions
    "UTAH_CHECKING_ROLES",
    "ROLE_PREDICATES",
    "validate_action",
    "is_retarget_blocked",
    # State and phases
    "validate_state_consistency",
    "validate_phase_order",
]
