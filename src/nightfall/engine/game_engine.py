"""GameEngine - library boundary for night resolution.

Loads a game from the persistence port, resolves one night in memory and
saves the result in one transaction. Resolution itself is the pure,
synchronous ``resolve_night``; only loading and saving await.
"""

import asyncio
import logging
import random
import weakref
from typing import Optional

from nightfall.catalog.role_catalog import RoleCatalog
from nightfall.catalog.rule_table import RuleTable
from nightfall.config import EngineConfig
from nightfall.engine.action_intake import apply_actions_to_game_state
from nightfall.engine.game_state import GameState
from nightfall.engine.night_action_resolver import NightActionResolver
from nightfall.engine.validator import CollectingValidator, ResolutionValidator, create_validator
from nightfall.events.night_events import NightAction, NightActionResult
from nightfall.handlers.registry import HandlerRegistry, create_default_registry
from nightfall.models.player import GameMeta, Player
from nightfall.models.role import Role, RoleInputRequirement, Team
from nightfall.storage.base import GameRepository, PersistenceError
from nightfall.validation.exceptions import DataIntegrityError, ValidationError
from nightfall.validation.night_actions import validate_action as validate_night_action
from nightfall.validation.state_consistency import validate_state_consistency
from nightfall.validation.types import errors_only

logger = logging.getLogger(__name__)


class GameEngine:
    """Night resolution for any number of games.

    Calls for the same game are serialised with a per-game asyncio.Lock;
    different games resolve concurrently.
    """

    def __init__(
        self,
        repository: GameRepository,
        config: Optional[EngineConfig] = None,
        catalog: Optional[RoleCatalog] = None,
        rule_table: Optional[RuleTable] = None,
        registry: Optional[HandlerRegistry] = None,
        validator: Optional[ResolutionValidator] = None,
    ):
        """Initialize the GameEngine.

        Args:
            repository: Persistence port for players, roles and meta rows
            config: Engine configuration (defaults: packaged documents)
            catalog: Role catalog, loaded from config when omitted
            rule_table: Rule table, loaded from config when omitted
            registry: Handler registry (default: every acting role)
            validator: Runtime validator; a CollectingValidator when
                       ``config.strict`` is set, otherwise a no-op

        Raises:
            DataIntegrityError: if a phase names a role with no handler
        """
        self.repository = repository
        self.config = config or EngineConfig()
        self.catalog = catalog or self.config.load_catalog()
        self.rule_table = rule_table or self.config.load_rule_table()
        self.registry = registry or create_default_registry()
        self.registry.check_phases(self.rule_table.phases)
        self.validator = validator or create_validator(collect=self.config.strict)
        self.resolver = NightActionResolver(self.registry, self.validator)
        # A lock lives only while a call for its game holds or awaits it
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    # ------------------------------------------------------------------
    # Role catalog API
    # ------------------------------------------------------------------

    def get_all_roles(self) -> list[Role]:
        return self.catalog.all_roles()

    def get_role_by_name(self, name: str) -> Optional[Role]:
        return self.catalog.get_role_by_name(name)

    def get_role_by_id(self, role_id: int) -> Optional[Role]:
        return self.catalog.get_role_by_id(role_id)

    def get_role_input_requirements(
        self,
        role_id: int,
        state: Optional[GameState] = None,
    ) -> Optional[RoleInputRequirement]:
        return self.catalog.get_input_requirements(role_id, state)

    def validate_action(self, role_id: int, action: NightAction, state: GameState) -> bool:
        """Check an action for a role id; unknown role ids are invalid."""
        role = self.catalog.get_role_by_id(role_id)
        if role is None:
            return False
        return validate_night_action(role, action, state)

    # ------------------------------------------------------------------
    # Night resolution
    # ------------------------------------------------------------------

    def _lock_for(self, game_id: int) -> asyncio.Lock:
        lock = self._locks.get(game_id)
        if lock is None:
            lock = self._locks[game_id] = asyncio.Lock()
        return lock

    async def calculate_night_actions(
        self,
        game_id: int,
        night: int,
        actions: list[NightAction],
        seed: Optional[int] = None,
    ) -> NightActionResult:
        """Load, resolve and save one night of one game.

        Args:
            game_id: Game to resolve
            night: Night number (>= 1)
            actions: Submitted night actions
            seed: Seed for the night's random source (falls back to config)

        Returns:
            The night's deaths, results and explanation

        Raises:
            DataIntegrityError: unresolvable roles or phases without handlers
            PersistenceError: load or save failed (nothing was committed)
            ValidationError: the resolved state is inconsistent (nothing saved)
        """
        async with self._lock_for(game_id):
            state = await self.load_game_state(game_id, night, seed=seed)
            result = self.resolve_night(state, actions)
            await self.save_game_state(state)
            return result

    def resolve_night(self, state: GameState, actions: list[NightAction]) -> NightActionResult:
        """Apply actions and run every phase. No I/O.

        Raises:
            ValidationError: if the resolved state breaks S.1-S.4, or if a
                strict engine collected any error
        """
        rejected = apply_actions_to_game_state(state, actions)
        if rejected:
            logger.info(
                "Game %s night %s: %d action(s) rejected",
                state.game_id, state.night_number, len(rejected),
            )

        alive_at_start = {p.username for p in state.living_players()}
        result = self.resolver.resolve(state)

        violations = validate_state_consistency(state, result, alive_at_start)
        if isinstance(self.validator, CollectingValidator):
            violations.extend(self.validator.get_violations())
            self.validator.clear()
        errors = errors_only(violations)
        if errors:
            raise ValidationError(errors)
        return result

    # ------------------------------------------------------------------
    # Loader / saver
    # ------------------------------------------------------------------

    async def load_game_state(
        self,
        game_id: int,
        night: int,
        seed: Optional[int] = None,
    ) -> GameState:
        """Build a fully populated GameState for one night.

        Raises:
            PersistenceError: if the repository fails
            DataIntegrityError: if a player's role is not in play
        """
        try:
            players = await self.repository.get_players(game_id)
            roles = await self.repository.get_game_roles(game_id)
            meta = await self.repository.get_game_meta(game_id, night)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to load game {game_id}: {e}") from e

        roles_by_name = {role.name: role for role in roles}
        unknown = sorted({p.role for p in players if p.role not in roles_by_name})
        if unknown:
            raise DataIntegrityError(
                f"Game {game_id}: players hold roles not in play: {', '.join(unknown)}"
            )

        for player in players:
            self._fill_from_role(player, roles_by_name[player.role])
        self._apply_meta(players, meta)

        if seed is None:
            seed = self.config.seed
        return GameState(
            game_id=game_id,
            night_number=night,
            players=players,
            roles=roles,
            game_meta=meta,
            order_of_operations=list(self.rule_table.phases),
            rules=self.rule_table.rules,
            rng=random.Random(seed),
        )

    @staticmethod
    def _fill_from_role(player: Player, role: Role) -> None:
        if player.team is None:
            player.team = role.team
        if role.team == Team.WOLF:
            player.is_wolf = True
        if role.has_charges and player.charges_left is None:
            player.charges_left = role.default_charges

    @staticmethod
    def _apply_meta(players: list[Player], meta: list[GameMeta]) -> None:
        by_username = {p.username: p for p in players}
        for row in meta:
            player = by_username.get(row.user_id)
            if player is None:
                logger.warning("Meta row for unknown player %s ignored", row.user_id)
                continue
            if "hypnotizedBy" in row.meta_data:
                player.hypnotized_by = row.meta_data["hypnotizedBy"]
                player.hypnotized_until = row.meta_data.get("hypnotizedUntil", row.night)

    async def save_game_state(self, state: GameState) -> None:
        """Persist players and meta rows atomically.

        Raises:
            PersistenceError: if any write fails (all writes rolled back)
        """
        try:
            async with self.repository.transaction():
                await self.repository.update_players(state.game_id, state.players)
                await self.repository.update_game_meta(state.game_id, state.game_meta)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to save game {state.game_id}: {e}") from e
        logger.debug("Saved game %s night %s", state.game_id, state.night_number)


__all__ = ["GameEngine"]
