"""Arsonist handlers.

The Arsonist acts in two phases: ``light`` (first phase of the night) burns
every doused player together with the Arsonist, and the kill phase handles
``douse X``. Each handler ignores the other mode.
"""

from typing import TYPE_CHECKING

from nightfall.events.night_events import Death
from nightfall.models.player import Player
from nightfall.handlers.base import HandlerResult, RoleHandler

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


def _is_light(player: Player) -> bool:
    return (player.action_notes or "").strip().lower() == "light"


class ArsonistLightHandler(RoleHandler):
    role_name = "Arsonist"
    verb = "light"

    def __call__(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        if not _is_light(player):
            return HandlerResult()
        return self.resolve(player, state, night_deaths)

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        doused = state.doused_players()
        if not doused:
            return self.fail(player)

        victims = doused + ([] if player in doused else [player])
        flavor = state.kill_flavor_for(self.role_name, "burned")
        result = HandlerResult()
        for victim in victims:
            result.add_death(state.mark_dead(
                victim,
                "burned to death",
                killer=self.role_name,
                flavor=flavor,
            ))

        burned = [death.player for death in result.deaths]
        result.add_result(player, f"Successfully burned {len(burned)} players")
        result.say(
            f"Arsonist lights all doused players on fire. "
            f"{', '.join(burned)} are burned to death."
        )
        return result


class ArsonistDouseHandler(RoleHandler):
    role_name = "Arsonist"
    verb = "douse"

    def __call__(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        if _is_light(player):
            return HandlerResult()
        return super().__call__(player, state, night_deaths)

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        if not player.action_notes.strip().lower().startswith("douse "):
            return self.fail(player)
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        target.is_doused = True
        result = HandlerResult()
        result.add_result(player, f"Successfully doused {target.username}")
        result.say(f"Arsonist {player.username} doused {target.username}.")
        return result


__all__ = ["ArsonistLightHandler", "ArsonistDouseHandler"]
