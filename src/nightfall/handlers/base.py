"""Shared base types for night phase handlers.

This module contains the types every role handler shares:
- HandlerResult: Output of one handler call (deaths, results, narrative)
- NightPhaseHandler Protocol: Interface the resolver dispatches to
- RoleHandler: Base class with target lookup, charge and failure helpers
- KILLER_ROLES: Roles whose visit counts as an attack
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Protocol

from pydantic import BaseModel, Field

from nightfall.events.night_events import Death, PlayerResult
from nightfall.models.player import Player

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


# Roles whose visit to a house counts as an attack on it
KILLER_ROLES = ("Alpha Wolf", "Serial Killer", "Murderer", "Arsonist")

FAILED = "failed"
BLOCKED = "blocked"


# ============================================================================
# Shared Handler Result Types
# ============================================================================


class HandlerResult(BaseModel):
    """Output from one handler call.

    - deaths: Deaths caused by this action, already applied to the state
    - results: Private result lines for players
    - narrative: One or more explanation lines, in order
    - healed: Usernames whose death earlier in this pass is cancelled
    """

    deaths: list[Death] = Field(default_factory=list)
    results: list[PlayerResult] = Field(default_factory=list)
    narrative: list[str] = Field(default_factory=list)
    healed: list[str] = Field(default_factory=list)

    def add_result(self, player: Player, message: str, **info) -> None:
        self.results.append(PlayerResult(
            player=player.username,
            result_message=message,
            additional_info=info or None,
        ))

    def add_death(self, death: Optional[Death]) -> bool:
        """Record a death returned by GameState.mark_dead (None is ignored)."""
        if death is None:
            return False
        self.deaths.append(death)
        return True

    def say(self, line: str) -> None:
        self.narrative.append(line)


# ============================================================================
# Handler Protocol
# ============================================================================


class NightPhaseHandler(Protocol):
    """A role's behaviour within one phase.

    Handlers mutate the game state in place (only the fields their role
    family owns) and describe what happened in the returned HandlerResult.
    """

    role_name: str

    def __call__(
        self,
        player: Player,
        state: "GameState",
        night_deaths: list[Death],
    ) -> HandlerResult:
        """Resolve one player's action.

        Args:
            player: The acting player (alive, not blocked)
            state: Game state to read and mutate
            night_deaths: Deaths recorded so far in this pass

        Returns:
            HandlerResult describing the action's outcome
        """
        ...


# ============================================================================
# Base Role Handler
# ============================================================================


class RoleHandler(ABC):
    """Base class for role handlers.

    Subclasses set ``role_name`` and ``verb`` and implement ``resolve``.
    ``__call__`` turns a missing action into the standard failure.
    """

    role_name: str = ""
    # Used in the failure narrative: "{role} {user} failed to {verb} target."
    verb: str = "act on"

    def __call__(
        self,
        player: Player,
        state: "GameState",
        night_deaths: list[Death],
    ) -> HandlerResult:
        if not player.action_notes:
            return self.fail(player)
        return self.resolve(player, state, night_deaths)

    @abstractmethod
    def resolve(
        self,
        player: Player,
        state: "GameState",
        night_deaths: list[Death],
    ) -> HandlerResult:
        """Apply the role's effect for a player who submitted an action."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def fail(self, player: Player, message: str = FAILED) -> HandlerResult:
        result = HandlerResult()
        result.add_result(player, message)
        result.say(f"{self.role_name} {player.username} failed to {self.verb} target.")
        return result

    def target_of(self, player: Player, state: "GameState") -> Optional[Player]:
        """The player named by the action notes."""
        return state.get_player(state.primary_target(player))

    def alive_target(self, player: Player, state: "GameState") -> Optional[Player]:
        target = self.target_of(player, state)
        if target is None or not target.is_alive:
            return None
        return target

    @staticmethod
    def has_charge(player: Player) -> bool:
        return (player.charges_left or 0) > 0

    @staticmethod
    def spend_charge(player: Player) -> None:
        player.charges_left = max(0, (player.charges_left or 0) - 1)

    @staticmethod
    def adopt_role(state: "GameState", player: Player, source: Player) -> None:
        """Take over another player's role, team and wolf flag.

        Charges restart from the new role's default.
        """
        player.role = source.role
        player.team = source.team
        player.is_wolf = source.is_wolf
        role = state.get_role(source.role)
        if role is not None and role.has_charges:
            player.charges_left = role.default_charges
        else:
            player.charges_left = None

    @staticmethod
    def attackers_of(state: "GameState", house: Player, exclude: Optional[Player] = None) -> list[Player]:
        """Living killer-role players heading to the house tonight, by id."""
        attackers = [
            p for p in state.visitors_of(house, exclude=exclude)
            if p.role in KILLER_ROLES
        ]
        return sorted(attackers, key=lambda p: p.id)


__all__ = [
    "KILLER_ROLES",
    "FAILED",
    "BLOCKED",
    "HandlerResult",
    "NightPhaseHandler",
    "RoleHandler",
]
