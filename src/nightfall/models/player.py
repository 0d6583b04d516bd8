"""Player and per-night meta models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nightfall.models.role import Team


class PlayerStatus(str, Enum):
    """Life status of a player."""

    ALIVE = "alive"
    DEAD = "dead"


class Player(BaseModel):
    """A player in one game.

    Keyed by (game_id, id). The engine mutates players in place while a night
    is resolved; the loader/saver boundary hands over the full set each night.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    username: str
    status: PlayerStatus = PlayerStatus.ALIVE
    role: str
    team: Optional[Team] = None
    is_wolf: bool = False

    is_framed: bool = False
    framed_night: Optional[int] = None
    charges_left: Optional[int] = None
    action_notes: Optional[str] = None  # raw submitted action/target for tonight

    # Nightly blocking/visiting flags, reset when a night begins
    is_jailed: bool = False
    is_locked: bool = False
    is_escorted: bool = False
    is_consorted: bool = False
    visited: Optional[str] = None

    is_doused: bool = False
    is_infected: bool = False
    is_carrier: bool = False
    infection_day: Optional[int] = None
    hypnotized_by: Optional[str] = None
    hypnotized_until: Optional[int] = None

    killed_by: Optional[str] = None
    kill_flavor: Optional[str] = None
    body_location: Optional[str] = None

    conversion_progress: int = 0
    conversion_target: Optional[str] = None
    last_target: Optional[str] = None

    @property
    def is_alive(self) -> bool:
        return self.status == PlayerStatus.ALIVE

    @property
    def is_dead(self) -> bool:
        return self.status == PlayerStatus.DEAD


class GameMeta(BaseModel):
    """Free-form per-player, per-night extension data (e.g. hypnosis expiry)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    game_id: int
    user_id: str
    night: int
    meta_data: dict[str, Any] = Field(default_factory=dict)
