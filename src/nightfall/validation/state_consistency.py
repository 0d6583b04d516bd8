"""State Consistency Validators (S.1-S.4).

Rules:
- S.1: Every Death must name an existing player whose status is dead
- S.2: A player cannot appear twice in one night's deaths
- S.3: A player alive at the start of the night and dead at the end must have
       a Death entry and killed_by set
- S.4: charges_left can never be negative
"""

from collections import Counter
from typing import TYPE_CHECKING, Optional

from nightfall.events.night_events import NightActionResult
from .types import ValidationViolation, ValidationSeverity

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


def validate_state_consistency(
    state: "GameState",
    result: NightActionResult,
    alive_at_start: Optional[set[str]] = None,
) -> list[ValidationViolation]:
    """Validate state consistency rules S.1-S.4.

    Args:
        state: Game state after resolution
        result: The night's resolution output
        alive_at_start: Usernames alive before the first phase ran. S.3 is
            skipped when not given.

    Returns:
        List of validation violations (empty if valid)
    """
    violations: list[ValidationViolation] = []

    # S.1: Death entries point at dead players
    for death in result.deaths:
        player = state.get_player(death.player)
        if player is None:
            violations.append(ValidationViolation(
                rule_id="S.1",
                category="State Consistency",
                message=f"Death recorded for unknown player {death.player}",
                severity=ValidationSeverity.ERROR,
                context={"player": death.player, "cause": death.cause}
            ))
        elif not player.is_dead:
            violations.append(ValidationViolation(
                rule_id="S.1",
                category="State Consistency",
                message=f"Death recorded for {death.player} but status={player.status.value}",
                severity=ValidationSeverity.ERROR,
                context={"player": death.player, "cause": death.cause}
            ))

    # S.2: No duplicate deaths
    counts = Counter(death.player for death in result.deaths)
    for username, count in counts.items():
        if count > 1:
            violations.append(ValidationViolation(
                rule_id="S.2",
                category="State Consistency",
                message=f"{username} appears {count} times in deaths",
                severity=ValidationSeverity.ERROR,
                context={"player": username, "count": count}
            ))

    # S.3: Everyone who died tonight has a Death entry and a killer
    if alive_at_start is not None:
        for player in state.players:
            if player.username not in alive_at_start or not player.is_dead:
                continue
            if player.username not in counts:
                violations.append(ValidationViolation(
                    rule_id="S.3",
                    category="State Consistency",
                    message=f"{player.username} died tonight without a Death entry",
                    severity=ValidationSeverity.ERROR,
                    context={"player": player.username}
                ))
            if not player.killed_by:
                violations.append(ValidationViolation(
                    rule_id="S.3",
                    category="State Consistency",
                    message=f"{player.username} died tonight without killed_by",
                    severity=ValidationSeverity.ERROR,
                    context={"player": player.username}
                ))

    # S.4: Charges never negative
    for player in state.players:
        if player.charges_left is not None and player.charges_left < 0:
            violations.append(ValidationViolation(
                rule_id="S.4",
                category="State Consistency",
                message=f"{player.username}: charges_left={player.charges_left}",
                severity=ValidationSeverity.ERROR,
                context={"player": player.username, "charges_left": player.charges_left}
            ))

    return violations


__all__ = ['validate_state_consistency']
