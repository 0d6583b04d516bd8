"""Scenario files: a game roster plus one night of actions.

A scenario is a YAML or JSON document:

    gameId: 1
    night: 1
    seed: 7
    roles: [Seer, Doctor, Alpha Wolf, Villager]   # optional
    players:
      - {id: 1, username: S, role: Seer}
    actions:
      - {playerId: 1, action: investigate, target: AW}

When ``roles`` is omitted, the roles in play are the players' roles.
"""

from pathlib import Path
from typing import Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nightfall.catalog.role_catalog import RoleCatalog, load_document
from nightfall.events.night_events import NightAction
from nightfall.models.player import GameMeta, Player
from nightfall.models.role import Role
from nightfall.storage.memory import InMemoryGameRepository
from nightfall.validation.exceptions import DataIntegrityError


class Scenario(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    game_id: int = 1
    night: int = Field(default=1, ge=1)
    seed: Optional[int] = None
    roles: Optional[list[str]] = None
    players: list[Player] = Field(default_factory=list)
    meta: list[GameMeta] = Field(default_factory=list)
    actions: list[NightAction] = Field(default_factory=list)

    def game_roles(self, catalog: RoleCatalog) -> list[Role]:
        """Resolve the roles in play against the catalog.

        Raises:
            DataIntegrityError: for a role name the catalog does not know
        """
        names = self.roles or list(dict.fromkeys(p.role for p in self.players))
        roles = []
        for name in names:
            role = catalog.get_role_by_name(name)
            if role is None:
                raise DataIntegrityError(f"Scenario names unknown role: {name}")
            roles.append(role)
        return roles

    def build_repository(self, catalog: RoleCatalog) -> InMemoryGameRepository:
        repository = InMemoryGameRepository()
        repository.add_game(self.game_id, self.players, self.game_roles(catalog), self.meta)
        return repository


def load_scenario(path: Union[str, Path]) -> Scenario:
    """Read a scenario file.

    Raises:
        DataIntegrityError: if the file is unreadable or malformed
    """
    try:
        return Scenario.model_validate(load_document(path))
    except pydantic.ValidationError as e:
        raise DataIntegrityError(f"Malformed scenario {path}: {e}") from e


__all__ = ["Scenario", "load_scenario"]
