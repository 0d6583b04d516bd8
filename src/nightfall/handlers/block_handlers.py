"""Block phase handlers: Jailkeeper, Escort, Consort.

Blockers only set flags on their target. Whether a flag actually stops the
target is decided by the resolver (GameState.is_blocked) when the target's
own phase comes around.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING

from nightfall.events.night_events import Death
from nightfall.models.player import Player
from nightfall.handlers.base import HandlerResult, RoleHandler

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


# Visiting one of these kills the visiting Escort/Consort
NEUTRAL_KILLERS = {
    "Serial Killer": "stabbed",
    "Murderer": "axe wounds",
}


class JailkeeperHandler(RoleHandler):
    role_name = "Jailkeeper"
    verb = "jail"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        target.is_jailed = True
        result = HandlerResult()
        result.add_result(player, f"Successfully jailed {target.username}")
        result.say(f"Jailkeeper {player.username} jailed {target.username}.")
        return result


class _VisitingBlockerHandler(RoleHandler):
    """Escort and Consort: block a mover, unless the target is a neutral killer."""

    past_tense: str = ""

    @abstractmethod
    def mark(self, target: Player) -> None:
        """Set the blocker's flag on the target."""

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        result = HandlerResult()
        if target.role in NEUTRAL_KILLERS:
            result.add_death(state.mark_dead(
                player,
                "killed by neutral killer",
                killer=target.role,
                location="townsquare",
                flavor=NEUTRAL_KILLERS[target.role],
            ))
            result.add_result(player, f"Killed by {target.role}")
            result.say(f"{self.role_name} {player.username} was killed by {target.role}.")
            return result

        self.mark(target)
        result.add_result(player, f"Successfully {self.past_tense} {target.username}")
        result.say(f"{self.role_name} {player.username} {self.past_tense} {target.username}.")
        return result


class EscortHandler(_VisitingBlockerHandler):
    role_name = "Escort"
    verb = "escort"
    past_tense = "escorted"

    def mark(self, target: Player) -> None:
        target.is_escorted = True


class ConsortHandler(_VisitingBlockerHandler):
    role_name = "Consort"
    verb = "consort"
    past_tense = "consorted"

    def mark(self, target: Player) -> None:
        target.is_consorted = True


__all__ = [
    "NEUTRAL_KILLERS",
    "JailkeeperHandler",
    "EscortHandler",
    "ConsortHandler",
]
