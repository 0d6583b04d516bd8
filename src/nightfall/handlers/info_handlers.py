"""Info phase handlers.

Framer is listed first in the info phase so a frame placed tonight already
fools tonight's Seer, Bartender and Gravedigger. Random picks (framed
reveals, Bartender lies, Bloodhound decoys) come from ``state.rng``.
"""

from typing import TYPE_CHECKING

from nightfall.events.night_events import Death
from nightfall.models.player import Player
from nightfall.models.role import Team
from nightfall.handlers.base import HandlerResult, RoleHandler

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


def revealed_role(state: "GameState", target: Player) -> str:
    """Role an investigator sees: a random Wolf-team role if framed.

    Falls back to the true role when no Wolf-team role is in play.
    """
    if target.is_framed:
        wolf_roles = state.role_names_for_team(Team.WOLF)
        if wolf_roles:
            return state.rng.choice(wolf_roles)
    return target.role


class FramerHandler(RoleHandler):
    role_name = "Framer"
    verb = "frame"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        target.is_framed = True
        target.framed_night = state.night_number
        result = HandlerResult()
        result.add_result(player, f"Successfully framed {target.username}")
        result.say(f"Framer {player.username} framed {target.username}.")
        return result


class SeerHandler(RoleHandler):
    role_name = "Seer"
    verb = "investigate"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        shown = revealed_role(state, target)
        result = HandlerResult()
        result.add_result(player, shown)
        result.say(f"Seer {player.username} investigated {target.username} and saw {shown}.")
        return result


class GravediggerHandler(RoleHandler):
    role_name = "Gravedigger"
    verb = "dig"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.target_of(player, state)
        if target is None or not target.is_dead:
            return self.fail(player)

        shown = revealed_role(state, target)
        result = HandlerResult()
        result.add_result(player, shown)
        result.say(f"Gravedigger {player.username} dug up {target.username} and found {shown}.")
        return result


class ClairvoyantHandler(RoleHandler):
    """Sees the true role; frames do not work on the Clairvoyant."""

    role_name = "Clairvoyant"
    verb = "investigate"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        result = HandlerResult()
        result.add_result(player, target.role)
        result.say(
            f"Clairvoyant {player.username} investigated {target.username} "
            f"and found {target.role}."
        )
        return result


class BartenderHandler(RoleHandler):
    """Hears three role names: the truth and two lies, or three lies if framed."""

    role_name = "Bartender"
    verb = "visit"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        excluded = set(state.rules.bartender_result_pool.excludes)
        pool = [
            role.name for role in state.roles
            if role.name not in excluded and role.name != target.role
        ]

        if target.is_framed:
            shown = state.rng.sample(pool, min(3, len(pool)))
            line = f"Bartender {player.username} visited framed {target.username} and received three lies."
        else:
            shown = [target.role] + state.rng.sample(pool, min(2, len(pool)))
            line = f"Bartender {player.username} visited {target.username} and received role information."
        state.rng.shuffle(shown)

        result = HandlerResult()
        result.add_result(player, " / ".join(shown), roles=list(shown))
        result.say(line)
        return result


class GraverobberHandler(RoleHandler):
    role_name = "Graverobber"
    verb = "rob"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.target_of(player, state)
        if target is None or not target.is_dead:
            return self.fail(player)

        self.adopt_role(state, player, target)
        result = HandlerResult()
        result.add_result(player, f"Successfully assumed role of {target.role}")
        result.say(f"Graverobber {player.username} assumed the role of {target.role}.")
        return result


class BloodhoundHandler(RoleHandler):
    """Sniffs out a role: one real holder hidden among up to two decoys."""

    role_name = "Bloodhound"
    verb = "track"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        wanted = player.action_notes.strip()
        holders = sorted(
            (p for p in state.living_players() if p.role == wanted),
            key=lambda p: p.id,
        )

        result = HandlerResult()
        if not holders:
            result.add_result(player, "failure")
            result.say(f"Bloodhound {player.username} failed to find {wanted}.")
            return result

        hit = holders[0]
        others = sorted(
            (p for p in state.living_players() if p is not hit and p is not player),
            key=lambda p: p.id,
        )
        names = [hit.username] + [
            p.username for p in state.rng.sample(others, min(2, len(others)))
        ]
        state.rng.shuffle(names)

        result.add_result(player, " / ".join(names))
        result.say(f"Bloodhound {player.username} searched for {wanted} and found {', '.join(names)}.")
        return result


__all__ = [
    "revealed_role",
    "FramerHandler",
    "SeerHandler",
    "GravediggerHandler",
    "ClairvoyantHandler",
    "BartenderHandler",
    "GraverobberHandler",
    "BloodhoundHandler",
]
