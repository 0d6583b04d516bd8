"""Rule table models.

The rule table is a flat document. Only a few sections drive resolution
(phase order, home targeting, block effects, body placement, re-targeting,
bartender pool, conversion); the rest are descriptive and kept so that a
loaded document round-trips.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PhaseAction(str, Enum):
    """Phase type tags, listed in canonical resolution order."""

    LIGHT = "light"
    INFO_AND_MOVEMENT = "info_and_movement"
    BLOCK = "block"
    INFO = "info"
    KILL = "kill"
    HEAL = "heal"


CANONICAL_PHASE_ORDER: tuple[PhaseAction, ...] = tuple(PhaseAction)


class RulesModel(BaseModel):
    """Base for rule document sections (camelCase documents)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderOfOperation(RulesModel):
    """One resolution phase."""

    name: str
    description: str = ""
    roles: list[str] = Field(default_factory=list)
    action: PhaseAction


class RampageRules(RulesModel):
    target_dies_at_own_home: bool = True
    rampaged_dies_at_target_home: bool = True
    escort_edge_case: str = ""


class RampageMechanics(RulesModel):
    rampageable_roles: list[str] = Field(default_factory=list)
    non_rampageable_roles: list[str] = Field(default_factory=list)
    rampage_rules: RampageRules = Field(default_factory=RampageRules)


class HomeTargeting(RulesModel):
    cannot_be_targeted_at_home: list[str] = Field(
        default_factory=lambda: ["Sleepwalker", "Orphan", "Lone Wolf"]
    )
    framer_exception: str = ""


class BlockNotifications(RulesModel):
    moving_roles_only: list[str] = Field(default_factory=list)
    all_players: list[str] = Field(default_factory=list)
    exceptions: dict[str, str] = Field(default_factory=dict)


class BlockEffects(RulesModel):
    # Blockers whose block only stops roles that move
    movement_based: list[str] = Field(default_factory=lambda: ["Escort", "Consort"])
    # Blockers that stop every role except the Seer
    all_actions_except_seer: list[str] = Field(default_factory=lambda: ["Jailkeeper"])


class BodyPlacement(RulesModel):
    default_location: str = "home"
    rampaged_bodies: str = ""
    blocked_killer_bodies: str = ""
    kill_flavors: dict[str, str] = Field(default_factory=dict)


class ReTargetingSamePlayer(RulesModel):
    allowed_for: list[str] = Field(default_factory=list)
    allowed_when: str = ""


class BartenderResultPool(RulesModel):
    includes: str = ""
    excludes: list[str] = Field(default_factory=list)
    bartender_can_appear: str = ""
    repeat_visits: str = ""


class ConversionRoles(RulesModel):
    convert_at_day_start: bool = False
    charge_inheritance: str = ""
    kill_count_roles: str = ""
    dig_inheritances: dict[str, str] = Field(default_factory=dict)
    theme_swap: str = ""
    orphan_visits_required: int = 3


class GameRules(RulesModel):
    """The full rule table."""

    order_of_operations: list[OrderOfOperation] = Field(default_factory=list)
    rampage_mechanics: RampageMechanics = Field(default_factory=RampageMechanics)
    home_targeting: HomeTargeting = Field(default_factory=HomeTargeting)
    framing_effects: dict[str, str] = Field(default_factory=dict)
    block_notifications: BlockNotifications = Field(default_factory=BlockNotifications)
    block_effects: BlockEffects = Field(default_factory=BlockEffects)
    body_placement: BodyPlacement = Field(default_factory=BodyPlacement)
    re_targeting_same_player: ReTargetingSamePlayer = Field(
        default_factory=ReTargetingSamePlayer
    )
    bartender_result_pool: BartenderResultPool = Field(
        default_factory=BartenderResultPool
    )
    conversion_roles: ConversionRoles = Field(default_factory=ConversionRoles)
