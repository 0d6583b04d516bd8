"""Info-and-movement phase handlers.

These roles act before any blocking happens and react to where other players
are heading tonight: Lookout, Veteran, Stalker, Locksmith, Patrolman,
Sleepwalker and Orphan.
"""

import logging
from typing import TYPE_CHECKING

from nightfall.events.night_events import Death
from nightfall.models.player import Player
from nightfall.handlers.base import HandlerResult, RoleHandler

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState

logger = logging.getLogger(__name__)


class LookoutHandler(RoleHandler):
    """Reports where the watched player went."""

    role_name = "Lookout"
    verb = "watch"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        destination = state.destination_of(target)
        if destination is None or destination == target.username:
            seen = "stayed home"
        else:
            seen = f"traveled to {destination}"

        result = HandlerResult()
        result.add_result(player, f"{target.username} {seen}")
        result.say(f"Lookout {player.username} watched {target.username} who {seen}.")
        return result


class VeteranHandler(RoleHandler):
    """On alert, kills everyone who visits the Veteran's house."""

    role_name = "Veteran"
    verb = "alert against"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        if "alert" not in player.action_notes or not self.has_charge(player):
            return self.fail(player)

        self.spend_charge(player)
        result = HandlerResult()
        flavor = state.kill_flavor_for(self.role_name, "vanished")
        for visitor in state.visitors_of(player):
            result.add_death(state.mark_dead(
                visitor,
                "vanished without a trace",
                killer=self.role_name,
                location="veteran home",
                flavor=flavor,
            ))

        if result.deaths:
            count = len(result.deaths)
            result.add_result(player, f"Alert successful. {count} visitors killed.")
            result.say(f"Veteran {player.username} went on alert and killed {count} visitors.")
        else:
            result.add_result(player, "Alert expended with no visitors.")
            result.say(f"Veteran {player.username} went on alert but no one visited.")
        return result


class StalkerHandler(RoleHandler):
    """Kills the target only if the target left home tonight.

    The charge is kept when the target stayed home.
    """

    role_name = "Stalker"
    verb = "stalk"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        if not self.has_charge(player):
            return self.fail(player)
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        result = HandlerResult()
        if not state.has_moved(target):
            result.add_result(player, "Target did not move")
            result.say(
                f"Stalker {player.username} failed to kill {target.username} who did not move."
            )
            return result

        result.add_death(state.mark_dead(
            target,
            "slashed to death on front porch",
            killer=self.role_name,
            location="front porch",
            flavor=state.kill_flavor_for(self.role_name, "slashed"),
        ))
        self.spend_charge(player)
        result.add_result(player, f"Successfully killed {target.username}")
        result.say(f"Stalker {player.username} killed {target.username} who was moving.")
        return result


class LocksmithHandler(RoleHandler):
    role_name = "Locksmith"
    verb = "lock"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        target.is_locked = True
        result = HandlerResult()
        result.add_result(player, f"Successfully locked {target.username}'s house")
        result.say(f"Locksmith {player.username} locked {target.username}'s house.")
        return result


class PatrolmanHandler(RoleHandler):
    """Guards a house; fights to the death with the first killer who shows up."""

    role_name = "Patrolman"
    verb = "patrol"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        result = HandlerResult()
        attackers = self.attackers_of(state, target, exclude=player)
        if not attackers:
            result.add_result(player, "No killers visited target")
            result.say(
                f"Patrolman {player.username} patrolled {target.username}'s house "
                f"but no killers visited."
            )
            return result

        killer = attackers[0]
        location = f"{target.username}'s front yard"
        result.add_death(state.mark_dead(
            killer,
            "killed in fight with Patrolman",
            killer=self.role_name,
            location=location,
            flavor="fight",
        ))
        result.add_death(state.mark_dead(
            player,
            "killed in fight with killer",
            killer=killer.role,
            location=location,
            flavor="fight",
        ))
        result.add_result(player, f"Killed {killer.username} in fight")
        result.say(
            f"Patrolman {player.username} killed {killer.username} in a fight "
            f"at {target.username}'s house."
        )
        return result


class SleepwalkerHandler(RoleHandler):
    """Wanders into a random house, avoiding the two named players."""

    role_name = "Sleepwalker"
    verb = "wander to"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        avoid = {name.strip() for name in player.action_notes.split(",")}
        houses = sorted(
            (
                p for p in state.living_players()
                if p is not player and p.username not in avoid
            ),
            key=lambda p: p.id,
        )

        result = HandlerResult()
        if not houses:
            result.add_result(player, "No available houses to visit")
            result.say(f"Sleepwalker {player.username} had no houses to visit.")
            return result

        house = state.rng.choice(houses)
        player.visited = house.username
        logger.debug("Sleepwalker %s wandered to %s", player.username, house.username)

        attackers = self.attackers_of(state, house, exclude=player)
        if attackers:
            result.add_death(state.mark_dead(
                player,
                "killed by same attack as target",
                killer=attackers[0].role,
                location=house.username,
                flavor="same attack",
            ))

        result.add_result(player, "Wandered to unknown location")
        result.say(f"Sleepwalker {player.username} wandered to {house.username}'s house.")
        return result


class OrphanHandler(RoleHandler):
    """Visits a player; after enough visits, becomes that player's role.

    An Orphan caught in an attack on the house it visits dies with the
    target, and a dead Orphan never converts.
    """

    role_name = "Orphan"
    verb = "visit"

    def resolve(self, player: Player, state: "GameState", night_deaths: list[Death]) -> HandlerResult:
        target = self.alive_target(player, state)
        if target is None:
            return self.fail(player)

        result = HandlerResult()
        attackers = self.attackers_of(state, target, exclude=player)
        if attackers:
            result.add_death(state.mark_dead(
                player,
                "killed by same attack as target",
                killer=attackers[0].role,
                location=target.username,
                flavor="same attack",
            ))

        player.conversion_progress += 1
        player.conversion_target = target.username
        required = state.rules.conversion_roles.orphan_visits_required
        progress = player.conversion_progress

        if progress >= required and player.is_alive:
            self.adopt_role(state, player, target)
            result.add_result(player, f"Successfully converted to {target.role}")
            result.say(f"Orphan {player.username} converted to {target.role}.")
            return result

        result.add_result(player, f"Conversion progress: {progress}/{required}")
        result.say(f"Orphan {player.username} visited {target.username} ({progress}/{required}).")
        return result


__all__ = [
    "LookoutHandler",
    "VeteranHandler",
    "StalkerHandler",
    "LocksmithHandler",
    "PatrolmanHandler",
    "SleepwalkerHandler",
    "OrphanHandler",
]
