"""Kill phase handlers.

Direct killers share one implementation (KillerHandler) parameterised by
cause, default flavor and whether the role spends a charge. Hypnotist and
Plague Bringer act in the kill phase without killing anyone.
"""

from typing import TYPE_CHECKING, Optional

from nightfall.events.night_events import Death
from nightfall.models.player import GameMeta, Player
from nightfall.handlers.base import HandlerResult, RoleHandler

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


class KillerHandler(RoleHandler):
    """Kills an alive target at their home.

    A charge is spent only when the kill lands. A target already killed
    earlier in the pass is no longer alive, so a second killer on the same
    victim fails.
    """

    verb = "kill"
    cause: str = ""
    flavor: str = ""
    uses_charge: bool = False
    success: str = "Successfully killed {target}"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        if self.uses_charge and not self.has_charge(player):
            return self.fail(player)
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        result = self.strike(player, target, state)
        if self.uses_charge and result.deaths:
            self.spend_charge(player)
        return result

    def strike(self, player: Player, target: Player, state: "GameState") -> HandlerResult:
        result = HandlerResult()
        result.add_death(state.mark_dead(
            target,
            self.cause,
            killer=self.role_name,
            flavor=state.kill_flavor_for(self.role_name, self.flavor),
        ))
        result.add_result(player, self.success.format(target=target.username))
        result.say(f"{self.role_name} {player.username} killed {target.username}.")
        return result


class HunterHandler(KillerHandler):
    role_name = "Hunter"
    verb = "shoot"
    cause = "shot"
    flavor = "bullet holes"
    uses_charge = True
    success = "Successfully shot {target}"


class VigilanteHandler(HunterHandler):
    role_name = "Vigilante"


class SerialKillerHandler(KillerHandler):
    role_name = "Serial Killer"
    cause = "stabbed to death"
    flavor = "stabbed"


class MurdererHandler(KillerHandler):
    role_name = "Murderer"
    cause = "killed with an axe"
    flavor = "axe wounds"


class AlphaWolfHandler(KillerHandler):
    role_name = "Alpha Wolf"
    cause = "killed by Alpha Wolf"
    flavor = "blood and fur"


class GluttonHandler(KillerHandler):
    """Eats a target who stayed home. A target who moved escapes and the charge is kept."""

    role_name = "Glutton"
    verb = "eat"
    cause = "eaten whole"
    flavor = "vanished without a trace"
    uses_charge = True
    success = "Successfully ate {target}"

    def strike(self, player: Player, target: Player, state: "GameState") -> HandlerResult:
        if state.has_moved(target):
            result = HandlerResult()
            result.add_result(player, "Target moved, failed to eat")
            result.say(
                f"Glutton {player.username} failed to eat {target.username} who was moving."
            )
            return result
        return super().strike(player, target, state)


class HypnotistHandler(RoleHandler):
    """Hypnotises the target until the next night.

    The effect is also written as a GameMeta row for the next night so the
    loader can re-apply it.
    """

    role_name = "Hypnotist"
    verb = "hypnotize"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        until = state.night_number + 1
        target.hypnotized_by = player.username
        target.hypnotized_until = until
        state.game_meta.append(GameMeta(
            game_id=state.game_id,
            user_id=target.username,
            night=until,
            meta_data={"hypnotizedBy": player.username, "hypnotizedUntil": until},
        ))

        result = HandlerResult()
        result.add_result(player, f"Successfully hypnotized {target.username}")
        result.say(f"Hypnotist {player.username} hypnotized {target.username}.")
        return result


class PlagueBringerHandler(RoleHandler):
    """Infects the target and everyone visiting the target tonight.

    A second infection turns the player into a carrier, who never dies of it.
    """

    role_name = "Plague Bringer"
    verb = "infect"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        victims = [target] + state.visitors_of(target, exclude=player)
        for victim in victims:
            self._infect(victim, state.night_number)

        result = HandlerResult()
        result.add_result(
            player,
            f"Successfully infected {len(victims)} players",
            infected=[v.username for v in victims],
        )
        result.say(f"Plague Bringer {player.username} infected {len(victims)} players.")
        return result

    @staticmethod
    def _infect(victim: Player, night: Optional[int]) -> None:
        if victim.is_carrier:
            return
        if victim.is_infected:
            victim.is_infected = False
            victim.is_carrier = True
            return
        victim.is_infected = True
        victim.infection_day = night


__all__ = [
    "KillerHandler",
    "HunterHandler",
    "VigilanteHandler",
    "SerialKillerHandler",
    "MurdererHandler",
    "AlphaWolfHandler",
    "GluttonHandler",
    "HypnotistHandler",
    "PlagueBringerHandler",
]
