"""Game state for one night's resolution.

GameState is the arena every handler works on: a single owned list of players
mutated in place while the phases run. Field ownership per handler family:

- kill-capable handlers own ``status``, ``killed_by``, ``kill_flavor``,
  ``body_location`` (always through :meth:`GameState.mark_dead`)
- block handlers own ``is_jailed``, ``is_escorted``, ``is_consorted``
- info handlers only read, except Framer (``is_framed``) and
  Graverobber (its own ``role``/``team``)
"""

import random
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from nightfall.events.night_events import Death
from nightfall.models.player import GameMeta, Player, PlayerStatus
from nightfall.models.role import Role, Team
from nightfall.models.rules import GameRules, OrderOfOperation


# Markers in action notes that mean "acted from home"
STAY_HOME_NOTES = {"none", "light", "alert"}
DOUSE_PREFIX = "douse "


class GameState(BaseModel):
    """Working set for one night of one game.

    Constructed fresh per resolution call; nothing here outlives the call
    except what the saver persists.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    game_id: int
    night_number: int = Field(default=1, ge=1)
    players: list[Player] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)
    game_meta: list[GameMeta] = Field(default_factory=list)
    order_of_operations: list[OrderOfOperation] = Field(default_factory=list)
    rules: GameRules = Field(default_factory=GameRules)
    rng: random.Random = Field(default_factory=random.Random, exclude=True)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_player(self, username: Optional[str]) -> Optional[Player]:
        """Get player by username."""
        if not username:
            return None
        for player in self.players:
            if player.username == username:
                return player
        return None

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        """Get player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_role(self, name: Optional[str]) -> Optional[Role]:
        """Get a role in play by name."""
        for role in self.roles:
            if role.name == name:
                return role
        return None

    def role_of(self, player: Player) -> Optional[Role]:
        return self.get_role(player.role)

    def living_players(self) -> list[Player]:
        return [p for p in self.players if p.is_alive]

    def dead_players(self) -> list[Player]:
        return [p for p in self.players if p.is_dead]

    def doused_players(self) -> list[Player]:
        """Living players currently doused by an Arsonist."""
        return [p for p in self.players if p.is_doused and p.is_alive]

    def role_names_for_team(self, team: Team) -> list[str]:
        return [role.name for role in self.roles if role.team == team]

    # ------------------------------------------------------------------
    # Rule-table helpers
    # ------------------------------------------------------------------

    def is_untargetable_at_home(self, player: Player) -> bool:
        """Check if a player's role is UTAH (untargetable at home)."""
        return player.role in self.rules.home_targeting.cannot_be_targeted_at_home

    def role_moves(self, player: Player) -> bool:
        role = self.role_of(player)
        return role is not None and role.moves

    def is_blocked(self, player: Player) -> bool:
        """Check if a block placed tonight stops this player's action.

        Jailed players lose every action except the Seer's; escorted or
        consorted players only lose actions that require moving.
        """
        if player.is_jailed and player.role != "Seer":
            return True
        if (player.is_escorted or player.is_consorted) and self.role_moves(player):
            return True
        return False

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def primary_target(self, player: Player) -> Optional[str]:
        """Username named first in the player's action notes, if any.

        "douse X" names X, "A, B" names A; "light", "alert" and role names
        name nobody.
        """
        notes = (player.action_notes or "").strip()
        if not notes or notes.lower() in STAY_HOME_NOTES:
            return None
        if notes.lower().startswith(DOUSE_PREFIX):
            notes = notes[len(DOUSE_PREFIX):].strip()
        candidate = notes.split(",")[0].strip()
        if self.get_player(candidate) is None:
            return None
        return candidate

    def destination_of(self, player: Player) -> Optional[str]:
        """House the player travels to tonight, or None if they stay home."""
        if not self.role_moves(player):
            return None
        if player.visited:
            return player.visited
        if "," in (player.action_notes or ""):
            # Two-name notes (Sleepwalker avoid list) only resolve via visited
            return None
        return self.primary_target(player)

    def has_moved(self, player: Player) -> bool:
        """Check if the player left their own home tonight."""
        destination = self.destination_of(player)
        return destination is not None and destination != player.username

    def visitors_of(self, target: Player, exclude: Optional[Player] = None) -> list[Player]:
        """Living players whose destination tonight is the target's house."""
        return [
            p for p in self.players
            if p.is_alive
            and p is not target
            and p is not exclude
            and self.destination_of(p) == target.username
        ]

    # ------------------------------------------------------------------
    # Death bookkeeping
    # ------------------------------------------------------------------

    def mark_dead(
        self,
        victim: Player,
        cause: str,
        killer: Optional[str] = None,
        location: Optional[str] = None,
        flavor: Optional[str] = None,
    ) -> Optional[Death]:
        """Kill a living player and return the Death record.

        Returns None if the victim is already dead, so one victim can never
        produce two Death entries in a pass.
        """
        if victim.is_dead:
            return None
        victim.status = PlayerStatus.DEAD
        victim.killed_by = killer or cause
        victim.kill_flavor = flavor or cause
        victim.body_location = location or self.rules.body_placement.default_location
        return Death(
            player=victim.username,
            cause=cause,
            killer=killer,
            location=victim.body_location,
            flavor=victim.kill_flavor,
        )

    def revive(self, player: Player) -> None:
        """Undo a same-night death (Doctor heal)."""
        player.status = PlayerStatus.ALIVE
        player.killed_by = None
        player.kill_flavor = None
        player.body_location = None

    def kill_flavor_for(self, role_name: str, default: str) -> str:
        return self.rules.body_placement.kill_flavors.get(role_name, default)
