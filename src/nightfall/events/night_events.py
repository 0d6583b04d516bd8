"""Night action input and resolution output records."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NightEventModel(BaseModel):
    """Base for boundary records (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NightAction(NightEventModel):
    """A player's submitted choice for one night.

    ``action`` is a free-text marker (e.g. contains "douse", "light" or
    "alert"); ``target`` is a username, or a role name for the Bloodhound.
    """

    player_id: int
    action: str
    target: Optional[str] = None
    secondary_target: Optional[str] = None


class Death(NightEventModel):
    """A death recorded during one resolution pass."""

    player: str
    cause: str
    killer: Optional[str] = None
    location: Optional[str] = None
    flavor: Optional[str] = None

    def __str__(self) -> str:
        killer = f" by {self.killer}" if self.killer else ""
        return f"Death({self.player}: {self.cause}{killer})"


class PlayerResult(NightEventModel):
    """One line of a player's private night report."""

    player: str
    result_message: str
    additional_info: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.player}: {self.result_message}"


class NightActionResult(NightEventModel):
    """Everything a night produced, in phase-then-player order."""

    deaths: list[Death] = Field(default_factory=list)
    results: list[PlayerResult] = Field(default_factory=list)
    explanation: str = ""

    def deaths_by_player(self) -> dict[str, Death]:
        return {death.player: death for death in self.deaths}

    def results_for(self, username: str) -> list[PlayerResult]:
        """Results addressed to one player (their private report)."""
        return [result for result in self.results if result.player == username]
