"""Action intake - merges submitted night actions into the game state.

Handlers read a player's choice from ``Player.action_notes``. This module
resets last night's transient flags, validates every submitted action and
writes the accepted ones into the notes. Rejected actions leave the notes
empty, so the handler reports the standard "failed" result.
"""

import logging
from typing import Optional

from nightfall.engine.game_state import GameState
from nightfall.events.night_events import NightAction
from nightfall.models.role import InputType, Role
from nightfall.validation.night_actions import validate_action

logger = logging.getLogger(__name__)


def begin_night(state: GameState) -> None:
    """Clear per-night flags left over from the previous night."""
    for player in state.players:
        player.action_notes = None
        player.visited = None
        player.is_jailed = False
        player.is_escorted = False
        player.is_consorted = False
        player.is_locked = False


def compose_action_notes(role: Role, action: NightAction) -> Optional[str]:
    """Render an accepted action the way handlers read it.

    - Arsonist: "light" or "douse {target}"
    - Veteran: "alert"
    - two-player roles: "{target}, {secondary_target}"
    - everything else: the target, or the action text when there is none
    """
    if role.name == "Arsonist":
        if "light" in action.action:
            return "light"
        return f"douse {action.target}"
    if role.name == "Veteran":
        return "alert" if "alert" in action.action else None
    if role.input_requirements.type == InputType.TWO_PLAYER_DROPDOWN:
        return f"{action.target}, {action.secondary_target}"
    return action.target or action.action


def apply_actions_to_game_state(
    state: GameState,
    actions: list[NightAction],
) -> list[NightAction]:
    """Validate actions and write the accepted ones into player notes.

    The last action submitted by a player wins. Actions from unknown or
    dead players, and actions the validator rejects, are dropped.

    Args:
        state: Game state to mutate
        actions: Submitted actions in submission order

    Returns:
        The rejected actions
    """
    begin_night(state)

    latest: dict[int, NightAction] = {}
    for action in actions:
        latest[action.player_id] = action

    rejected: list[NightAction] = []
    for player_id, action in latest.items():
        actor = state.get_player_by_id(player_id)
        if actor is None or not actor.is_alive:
            logger.warning(
                "Game %s night %s: ignoring action from %s player %s",
                state.game_id, state.night_number,
                "unknown" if actor is None else "dead", player_id,
            )
            rejected.append(action)
            continue

        role = state.role_of(actor)
        if role is None or not validate_action(role, action, state):
            logger.warning(
                "Game %s night %s: invalid %s action from %s: %s -> %s",
                state.game_id, state.night_number, actor.role, actor.username,
                action.action, action.target,
            )
            rejected.append(action)
            continue

        actor.action_notes = compose_action_notes(role, action)
        logger.debug("Accepted %s action for %s: %s", actor.role, actor.username, actor.action_notes)

    return rejected


def record_last_targets(state: GameState) -> None:
    """Remember each player's primary target for the re-targeting rule."""
    for player in state.players:
        player.last_target = state.primary_target(player)


__all__ = [
    "begin_night",
    "compose_action_notes",
    "apply_actions_to_game_state",
    "record_last_targets",
]
