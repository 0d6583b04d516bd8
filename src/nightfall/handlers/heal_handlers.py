"""Heal phase handler: Doctor.

The heal phase runs last, so the Doctor sees every death recorded earlier in
the pass and can cancel one. Cancellation is reported through
``HandlerResult.healed``; the resolver drops the matching Death entry.
"""

from typing import TYPE_CHECKING

from nightfall.events.night_events import Death
from nightfall.models.player import Player
from nightfall.handlers.base import HandlerResult, RoleHandler

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


class DoctorHandler(RoleHandler):
    role_name = "Doctor"
    verb = "heal"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.target_of(player, state)
        if target is None:
            return self.fail(player)

        result = HandlerResult()
        if any(death.player == target.username for death in night_deaths):
            state.revive(target)
            result.healed.append(target.username)
            result.add_result(player, f"Successfully healed {target.username}")
            result.say(f"Doctor {player.username} healed {target.username} from death.")
            return result

        if target.is_dead:
            # Died on an earlier night
            return self.fail(player)

        result.add_result(player, f"No healing needed for {target.username}")
        result.say(
            f"Doctor {player.username} attempted to heal {target.username} "
            f"but no healing was needed."
        )
        return result


__all__ = ["DoctorHandler"]
