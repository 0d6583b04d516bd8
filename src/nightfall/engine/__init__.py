"""Engine package - night resolution components."""

from .game_state import GameState
from .action_intake import (
    apply_actions_to_game_state,
    begin_night,
    compose_action_notes,
    record_last_targets,
)
from .validator import (
    ResolutionValidator,
    NoOpValidator,
    CollectingValidator,
    create_validator,
)
from .night_action_resolver import NightActionResolver, NightLedger
from .game_engine import GameEngine

__all__ = [
    "GameState",
    "apply_actions_to_game_state",
    "begin_night",
    "compose_action_notes",
    "record_last_targets",
    "ResolutionValidator",
    "NoOpValidator",
    "CollectingValidator",
    "create_validator",
    "NightActionResolver",
    "NightLedger",
    "GameEngine",
]
