"""Models package."""

from nightfall.models.role import (
    Team,
    InputType,
    InputRequirement,
    Role,
    RoleInputRequirement,
)
from nightfall.models.player import PlayerStatus, Player, GameMeta
from nightfall.models.rules import (
    PhaseAction,
    CANONICAL_PHASE_ORDER,
    OrderOfOperation,
    HomeTargeting,
    BlockEffects,
    BodyPlacement,
    ReTargetingSamePlayer,
    BartenderResultPool,
    ConversionRoles,
    GameRules,
)

__all__ = [
    "Team",
    "InputType",
    "InputRequirement",
    "Role",
    "RoleInputRequirement",
    "PlayerStatus",
    "Player",
    "GameMeta",
    "PhaseAction",
    "CANONICAL_PHASE_ORDER",
    "OrderOfOperation",
    "HomeTargeting",
    "BlockEffects",
    "BodyPlacement",
    "ReTargetingSamePlayer",
    "BartenderResultPool",
    "ConversionRoles",
    "GameRules",
]
