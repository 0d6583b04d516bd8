"""Role models.

Roles are static definitions loaded from the role catalog document. The role
name is the key used everywhere else (players reference roles by name).
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Team(str, Enum):
    """Teams a role can belong to."""

    TOWN = "Town"
    WOLF = "Wolf"
    NEUTRAL = "Neutral"


class InputType(str, Enum):
    """Shape of the night action input a role submits."""

    NONE = "none"
    PLAYER_DROPDOWN = "player_dropdown"
    TWO_PLAYER_DROPDOWN = "two_player_dropdown"
    DEAD_PLAYER_DROPDOWN = "dead_player_dropdown"
    ROLE_DROPDOWN = "role_dropdown"
    ALERT_TOGGLE = "alert_toggle"
    ARSONIST_ACTION = "arsonist_action"


class InputRequirement(BaseModel):
    """How a role's night action is entered."""

    model_config = ConfigDict(frozen=True)

    type: InputType = InputType.NONE
    description: str = ""
    validation: str = ""


class Role(BaseModel):
    """Static role definition. Immutable once loaded."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    name: str
    team: Team
    targets: str = ""
    moves: bool = False  # acting away from home counts as traveling
    description: str = ""
    framer_interaction: Optional[str] = None
    special_properties: list[str] = Field(default_factory=list)
    immunities: Optional[str] = None
    standard_results_flavor: Optional[Union[str, dict[str, str]]] = None
    heal_flavor: Optional[str] = None
    has_charges: bool = False
    default_charges: Optional[int] = None
    in_wolf_chat: bool = False
    input_requirements: InputRequirement = Field(default_factory=InputRequirement)


class RoleInputRequirement(BaseModel):
    """Everything a UI needs to build the night action form for a role."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    role_id: int
    role_name: str
    input_type: InputType
    description: str
    validation: str
    options: list[str] = Field(default_factory=list)
    multi_select: bool = False
    allow_none: bool = False
