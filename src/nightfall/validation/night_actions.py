"""Night Action Validators.

Each role with a targeting restriction has a predicate here. Predicates are
pure: they read the game state and return a bool, never raise and never
mutate. Roles without a predicate are valid by default.

Rules:
- Alive-target roles: target must exist and be alive
- Dead-target roles (Gravedigger, Graverobber): target must exist and be dead
- UTAH: roles listed in the rule table's home-targeting section cannot be
  targeted at home by the roles that check it (see UTAH_CHECKING_ROLES)
- Charge-gated roles (Hunter, Veteran, Glutton, Stalker): need a charge left
- Two-target roles (Matchmaker, Sleepwalker): both targets required
- Arsonist: "light" needs a doused player, "douse" needs a valid target
- Bloodhound: target is a role name in play, never "Villager"
- Re-targeting: same target as last night only for roles the rule table allows

Known asymmetry: Doctor, Lookout, Patrolman, Seer, Framer, Lone Wolf,
Stalker, Orphan, Plague Bringer, Locksmith and Sleepwalker do not check UTAH
even though similar roles do. This is kept as-is.
"""

from typing import TYPE_CHECKING, Callable, Optional

from nightfall.events.night_events import NightAction
from nightfall.models.player import Player
from nightfall.models.role import Role

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState


Predicate = Callable[[NightAction, "GameState"], bool]

UTAH_CHECKING_ROLES = frozenset({
    "Bartender",
    "Escort",
    "Hunter",
    "Jailkeeper",
    "Matchmaker",
    "Alpha Wolf",
    "Clairvoyant",
    "Consort",
    "Glutton",
    "Hypnotist",
    "Arsonist",
    "Murderer",
    "Serial Killer",
})


# ============================================================================
# Shared checks
# ============================================================================


def _target(action: NightAction, state: "GameState") -> Optional[Player]:
    return state.get_player(action.target)


def _targetable(role_name: str, target: Optional[Player], state: "GameState") -> bool:
    """Alive target, and not untargetable at home if the role checks UTAH."""
    if target is None or not target.is_alive:
        return False
    if role_name not in UTAH_CHECKING_ROLES:
        return True
    return not state.is_untargetable_at_home(target)


def _alive_check(role_name: str) -> Predicate:
    def predicate(action: NightAction, state: "GameState") -> bool:
        return _targetable(role_name, _target(action, state), state)
    return predicate


def _dead_target(action: NightAction, state: "GameState") -> bool:
    target = _target(action, state)
    return target is not None and target.is_dead


def _has_charges(action: NightAction, state: "GameState") -> bool:
    actor = state.get_player_by_id(action.player_id)
    if actor is None:
        return False
    return (actor.charges_left or 0) > 0


def _charged(check: Predicate) -> Predicate:
    def predicate(action: NightAction, state: "GameState") -> bool:
        return check(action, state) and _has_charges(action, state)
    return predicate


# ============================================================================
# Role-specific predicates
# ============================================================================


def validate_matchmaker_action(action: NightAction, state: "GameState") -> bool:
    """Both lovers must be alive and targetable at home."""
    if not action.target or not action.secondary_target:
        return False
    first = state.get_player(action.target)
    second = state.get_player(action.secondary_target)
    return (
        _targetable("Matchmaker", first, state)
        and _targetable("Matchmaker", second, state)
    )


def validate_sleepwalker_action(action: NightAction, state: "GameState") -> bool:
    """Both avoid-targets must be present and alive."""
    if not action.target or not action.secondary_target:
        return False
    first = state.get_player(action.target)
    second = state.get_player(action.secondary_target)
    return (
        _targetable("Sleepwalker", first, state)
        and _targetable("Sleepwalker", second, state)
    )


def validate_veteran_action(action: NightAction, state: "GameState") -> bool:
    if not _has_charges(action, state):
        return False
    return "alert" in action.action


def validate_arsonist_action(action: NightAction, state: "GameState") -> bool:
    if "light" in action.action:
        return len(state.doused_players()) > 0
    if "douse" in action.action:
        return _targetable("Arsonist", _target(action, state), state)
    return False


def validate_bloodhound_action(action: NightAction, state: "GameState") -> bool:
    target_role = action.target
    if not target_role or target_role == "Villager":
        return False
    return state.get_role(target_role) is not None


ROLE_PREDICATES: dict[str, Predicate] = {
    "Bartender": _alive_check("Bartender"),
    "Doctor": _alive_check("Doctor"),
    "Escort": _alive_check("Escort"),
    "Gravedigger": _dead_target,
    "Hunter": _charged(_alive_check("Hunter")),
    "Jailkeeper": _alive_check("Jailkeeper"),
    "Locksmith": _alive_check("Locksmith"),
    "Lookout": _alive_check("Lookout"),
    "Matchmaker": validate_matchmaker_action,
    "Patrolman": _alive_check("Patrolman"),
    "Seer": _alive_check("Seer"),
    "Sleepwalker": validate_sleepwalker_action,
    "Veteran": validate_veteran_action,
    "Alpha Wolf": _alive_check("Alpha Wolf"),
    "Bloodhound": validate_bloodhound_action,
    "Clairvoyant": _alive_check("Clairvoyant"),
    "Consort": _alive_check("Consort"),
    "Framer": _alive_check("Framer"),
    "Glutton": _charged(_alive_check("Glutton")),
    "Hypnotist": _alive_check("Hypnotist"),
    "Lone Wolf": _alive_check("Lone Wolf"),
    "Stalker": _charged(_alive_check("Stalker")),
    "Arsonist": validate_arsonist_action,
    "Graverobber": _dead_target,
    "Murderer": _alive_check("Murderer"),
    "Orphan": _alive_check("Orphan"),
    "Plague Bringer": _alive_check("Plague Bringer"),
    "Serial Killer": _alive_check("Serial Killer"),
}


# ============================================================================
# Entry point
# ============================================================================


def is_retarget_blocked(role: Role, action: NightAction, state: "GameState") -> bool:
    """Check the rule table's same-target-twice restriction.

    Only applies when the target names a player and the role is not listed
    as allowed to pick the same player on consecutive nights.
    """
    actor = state.get_player_by_id(action.player_id)
    if actor is None or actor.last_target is None:
        return False
    if state.get_player(action.target) is None:
        return False
    if role.name in state.rules.re_targeting_same_player.allowed_for:
        return False
    return action.target == actor.last_target


def validate_action(role: Role, action: NightAction, state: "GameState") -> bool:
    """Check whether a submitted night action is legal for a role.

    Args:
        role: The acting player's role definition
        action: The submitted action
        state: Current game state (read only)

    Returns:
        True if the action may be resolved, False otherwise
    """
    if not action.action:
        return False

    predicate = ROLE_PREDICATES.get(role.name)
    if predicate is not None and not predicate(action, state):
        return False

    return not is_retarget_blocked(role, action, state)


__all__ = [
    "UTAH_CHECKING_ROLES",
    "ROLE_PREDICATES",
    "validate_action",
    "is_retarget_blocked",
    "validate_matchmaker_action",
    "validate_sleepwalker_action",
    "validate_veteran_action",
    "validate_arsonist_action",
    "validate_bloodhound_action",
]
