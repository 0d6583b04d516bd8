"""Night action resolution - runs the phase pipeline over a game state.

Resolution order comes from ``state.order_of_operations``; the canonical
order is light -> info_and_movement -> block -> info -> kill -> heal.
Within a phase, players act ordered by (position of their role in the
phase's role list, player id).
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from nightfall.engine.action_intake import record_last_targets
from nightfall.engine.game_state import GameState
from nightfall.engine.validator import NoOpValidator, ResolutionValidator
from nightfall.events.night_events import Death, NightActionResult, PlayerResult
from nightfall.handlers.base import BLOCKED, HandlerResult
from nightfall.handlers.registry import HandlerRegistry, create_default_registry
from nightfall.models.player import Player
from nightfall.models.rules import OrderOfOperation
from nightfall.validation.exceptions import DataIntegrityError

logger = logging.getLogger(__name__)


class NightLedger(BaseModel):
    """Everything recorded so far in one resolution pass."""

    deaths: list[Death] = Field(default_factory=list)
    results: list[PlayerResult] = Field(default_factory=list)
    narrative: list[str] = Field(default_factory=list)

    def record(self, outcome: HandlerResult) -> None:
        self.deaths.extend(outcome.deaths)
        self.results.extend(outcome.results)
        self.narrative.extend(outcome.narrative)
        for username in outcome.healed:
            self.deaths = [d for d in self.deaths if d.player != username]

    def to_result(self) -> NightActionResult:
        return NightActionResult(
            deaths=list(self.deaths),
            results=list(self.results),
            explanation="\n".join(self.narrative),
        )


class NightActionResolver:
    """Computes a night's outcome from the actions stored on the players.

    Resolution is synchronous and in-memory: handlers mutate
    ``state.players`` in place and the resolver collects what they report.
    """

    def __init__(
        self,
        registry: Optional[HandlerRegistry] = None,
        validator: Optional[ResolutionValidator] = None,
    ):
        self.registry = registry or create_default_registry()
        self.validator = validator or NoOpValidator()

    def resolve(self, state: GameState) -> NightActionResult:
        """Run every phase in order and return the night's outcome.

        Args:
            state: Game state with tonight's actions in ``action_notes``

        Returns:
            NightActionResult with deaths, results and the explanation

        Raises:
            DataIntegrityError: if a phase names a role with no handler
        """
        self.registry.check_phases(state.order_of_operations)
        alive_at_start = {p.username for p in state.living_players()}
        self.validator.on_night_start(state)

        ledger = NightLedger()
        for phase in state.order_of_operations:
            self.execute_phase(phase, state, ledger)
            self.validator.on_phase_end(phase, state, ledger.to_result())

        record_last_targets(state)
        result = ledger.to_result()
        self.validator.on_night_end(state, result, alive_at_start)

        logger.info(
            "Game %s night %s resolved: %d deaths, %d results",
            state.game_id, state.night_number, len(result.deaths), len(result.results),
        )
        return result

    def phase_players(self, phase: OrderOfOperation, state: GameState) -> list[Player]:
        """Players whose role is listed in the phase, in dispatch order."""
        rank = {name: index for index, name in enumerate(phase.roles)}
        players = [p for p in state.players if p.role in rank]
        return sorted(players, key=lambda p: (rank[p.role], p.id))

    def execute_phase(
        self,
        phase: OrderOfOperation,
        state: GameState,
        ledger: NightLedger,
    ) -> None:
        """Dispatch every acting player in one phase to their handler."""
        logger.debug("Phase '%s' (%s)", phase.name, phase.action.value)

        for player in self.phase_players(phase, state):
            # Killed or converted earlier in this phase
            if not player.is_alive or player.role not in phase.roles:
                continue

            if state.is_blocked(player):
                ledger.results.append(PlayerResult(player=player.username, result_message=BLOCKED))
                ledger.narrative.append(f"{player.role} {player.username} was blocked.")
                continue

            handler = self.registry.get(phase.action, player.role)
            if handler is None:
                raise DataIntegrityError(
                    f"No handler for {player.role} in phase '{phase.name}'"
                )
            ledger.record(handler(player, state, ledger.deaths))


__all__ = ["NightLedger", "NightActionResolver"]
