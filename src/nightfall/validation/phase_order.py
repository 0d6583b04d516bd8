"""Phase Order Validators (P.1-P.2).

Rules:
- P.1: Phases should follow the canonical order
       light -> info_and_movement -> block -> info -> kill -> heal
       (the order is configuration, so a deviation is a WARNING)
- P.2: A role cannot be listed twice in the same phase
"""

from nightfall.models.rules import CANONICAL_PHASE_ORDER, OrderOfOperation
from .types import ValidationViolation, ValidationSeverity


def validate_phase_order(
    order: list[OrderOfOperation],
) -> list[ValidationViolation]:
    """Validate an order-of-operations list.

    Args:
        order: Phases in the order they will run

    Returns:
        List of validation violations (empty if valid)
    """
    violations: list[ValidationViolation] = []

    # P.1: canonical relative order
    rank = {action: index for index, action in enumerate(CANONICAL_PHASE_ORDER)}
    previous: OrderOfOperation | None = None
    for phase in order:
        if previous is not None and rank[phase.action] < rank[previous.action]:
            violations.append(ValidationViolation(
                rule_id="P.1",
                category="Phase Order",
                message=(
                    f"Phase '{phase.name}' ({phase.action.value}) runs after "
                    f"'{previous.name}' ({previous.action.value})"
                ),
                severity=ValidationSeverity.WARNING,
                context={"phase": phase.name, "previous": previous.name}
            ))
        previous = phase

    # P.2: no duplicate role within a phase
    for phase in order:
        seen: set[str] = set()
        for role_name in phase.roles:
            if role_name in seen:
                violations.append(ValidationViolation(
                    rule_id="P.2",
                    category="Phase Order",
                    message=f"Role {role_name} listed twice in phase '{phase.name}'",
                    severity=ValidationSeverity.ERROR,
                    context={"phase": phase.name, "role": role_name}
                ))
            seen.add(role_name)

    return violations


__all__ = ['validate_phase_order']
