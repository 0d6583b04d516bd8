"""ResolutionValidator - runtime validation hooks for night resolution.

This module provides a Protocol for validating the game state while a night
is resolved. Hooks are called by the resolver at key points so violations
are caught next to the phase that caused them.

Usage:
    # In tests or development
    validator = CollectingValidator()
    resolver = NightActionResolver(validator=validator)
    resolver.resolve(state)
    violations = validator.get_violations()

    # No overhead in production
    resolver = NightActionResolver()
"""

from typing import Optional, Protocol

from nightfall.engine.game_state import GameState
from nightfall.events.night_events import NightActionResult
from nightfall.models.rules import OrderOfOperation
from nightfall.validation.types import ValidationViolation


class ResolutionValidator(Protocol):
    """Hooks for runtime validation during one resolution pass."""

    def on_night_start(self, state: GameState) -> None:
        """Called before the first phase runs."""
        ...

    def on_phase_end(
        self,
        phase: OrderOfOperation,
        state: GameState,
        partial: NightActionResult,
    ) -> None:
        """Called after each phase with everything recorded so far."""
        ...

    def on_night_end(
        self,
        state: GameState,
        result: NightActionResult,
        alive_at_start: set[str],
    ) -> list[ValidationViolation]:
        """Called once the pass is complete. Returns all violations found."""
        ...


class NoOpValidator:
    """No-op validator for production use.

    All hooks do nothing.
    """

    def on_night_start(self, state: GameState) -> None:
        pass

    def on_phase_end(
        self,
        phase: OrderOfOperation,
        state: GameState,
        partial: NightActionResult,
    ) -> None:
        pass

    def on_night_end(
        self,
        state: GameState,
        result: NightActionResult,
        alive_at_start: set[str],
    ) -> list[ValidationViolation]:
        return []


class CollectingValidator(NoOpValidator):
    """Validator that collects violations for later inspection.

    Use this in tests (or with ``strict`` engine config) to check that the
    phase order and the state stay consistent while resolving.
    """

    def __init__(self):
        self._violations: list[ValidationViolation] = []

    def get_violations(self) -> list[ValidationViolation]:
        """Get all collected violations."""
        return list(self._violations)

    def clear(self) -> None:
        """Clear collected violations."""
        self._violations.clear()

    def on_night_start(self, state: GameState) -> None:
        """Validate the order of operations (P.1-P.2)."""
        from nightfall.validation import validate_phase_order
        self._violations.extend(validate_phase_order(state.order_of_operations))

    def on_phase_end(
        self,
        phase: OrderOfOperation,
        state: GameState,
        partial: NightActionResult,
    ) -> None:
        """Validate deaths recorded so far (S.1, S.2, S.4)."""
        from nightfall.validation import validate_state_consistency
        for violation in validate_state_consistency(state, partial):
            violation.context = {**(violation.context or {}), "phase": phase.name}
            self._violations.append(violation)

    def on_night_end(
        self,
        state: GameState,
        result: NightActionResult,
        alive_at_start: set[str],
    ) -> list[ValidationViolation]:
        """Final state consistency check (S.1-S.4). Returns all violations."""
        from nightfall.validation import validate_state_consistency
        self._violations.extend(validate_state_consistency(state, result, alive_at_start))
        return self.get_violations()


def create_validator(collect: bool = False) -> ResolutionValidator:
    """Factory function to create appropriate validator.

    Args:
        collect: If True, returns CollectingValidator.
                 If False, returns NoOpValidator.

    Returns:
        A ResolutionValidator implementation.
    """
    if collect:
        return CollectingValidator()
    return NoOpValidator()


__all__ = [
    "ResolutionValidator",
    "NoOpValidator",
    "CollectingValidator",
    "create_validator",
]
