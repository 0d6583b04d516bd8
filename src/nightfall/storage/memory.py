"""In-memory GameRepository.

Used by the CLI and the tests. Reads hand out deep copies so the engine can
never mutate stored rows except through ``update_*``.
"""

import copy
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable

from nightfall.models.player import GameMeta, Player
from nightfall.models.role import Role
from nightfall.storage.base import PersistenceError

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """Dict-backed repository with snapshot/rollback transactions."""

    def __init__(self):
        self._players: dict[int, dict[int, Player]] = {}
        self._roles: dict[int, list[Role]] = {}
        self._meta: dict[int, list[GameMeta]] = {}

    def add_game(
        self,
        game_id: int,
        players: Iterable[Player],
        roles: Iterable[Role],
        meta: Iterable[GameMeta] = (),
    ) -> None:
        """Seed a game."""
        self._players[game_id] = {p.id: p.model_copy(deep=True) for p in players}
        self._roles[game_id] = list(roles)
        self._meta[game_id] = [m.model_copy(deep=True) for m in meta]

    def _require_game(self, game_id: int) -> None:
        if game_id not in self._players:
            raise PersistenceError(f"Unknown game {game_id}")

    # ------------------------------------------------------------------
    # GameRepository
    # ------------------------------------------------------------------

    async def get_players(self, game_id: int) -> list[Player]:
        self._require_game(game_id)
        players = sorted(self._players[game_id].values(), key=lambda p: p.id)
        return [p.model_copy(deep=True) for p in players]

    async def get_game_roles(self, game_id: int) -> list[Role]:
        self._require_game(game_id)
        return list(self._roles[game_id])

    async def get_game_meta(self, game_id: int, night: int) -> list[GameMeta]:
        self._require_game(game_id)
        return [m.model_copy(deep=True) for m in self._meta[game_id] if m.night == night]

    async def update_players(self, game_id: int, players: list[Player]) -> None:
        self._require_game(game_id)
        stored = self._players[game_id]
        for player in players:
            stored[player.id] = player.model_copy(deep=True)

    async def update_game_meta(self, game_id: int, meta: list[GameMeta]) -> None:
        """Upsert meta rows keyed by (user_id, night)."""
        self._require_game(game_id)
        rows = {(m.user_id, m.night): m for m in self._meta[game_id]}
        for row in meta:
            rows[(row.user_id, row.night)] = row.model_copy(deep=True)
        self._meta[game_id] = list(rows.values())

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshot = (
            copy.deepcopy(self._players),
            copy.deepcopy(self._roles),
            copy.deepcopy(self._meta),
        )
        try:
            yield
        except BaseException:
            logger.warning("Rolling back in-memory transaction")
            self._players, self._roles, self._meta = snapshot
            raise


__all__ = ["InMemoryGameRepository"]
