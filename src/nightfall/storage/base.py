"""Persistence port used by the game engine.

The engine depends only on these method shapes, never on a storage
technology. Writes made inside ``transaction()`` are all-or-nothing.
"""

from typing import AsyncContextManager, Protocol

from nightfall.models.player import GameMeta, Player
from nightfall.models.role import Role


class PersistenceError(Exception):
    """Raised when loading or saving game state fails.

    A failed save has been rolled back when this is raised.
    """

    pass


class GameRepository(Protocol):
    """Storage for players, roles in play and per-night meta rows."""

    async def get_players(self, game_id: int) -> list[Player]:
        """All players of a game, alive and dead."""
        ...

    async def get_game_roles(self, game_id: int) -> list[Role]:
        """Roles in play in a game."""
        ...

    async def get_game_meta(self, game_id: int, night: int) -> list[GameMeta]:
        """Meta rows recorded for one night."""
        ...

    async def update_players(self, game_id: int, players: list[Player]) -> None:
        ...

    async def update_game_meta(self, game_id: int, meta: list[GameMeta]) -> None:
        ...

    def transaction(self) -> AsyncContextManager[None]:
        """Async context manager; rolls back every write if the block raises."""
        ...


__all__ = ["GameRepository", "PersistenceError"]
