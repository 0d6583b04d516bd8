"""Tests for GameEngine: load, resolve, save and per-game locking.

Tests cover:
- End-to-end night through the in-memory repository
- Loader fills team, wolf flag and charges from the role definition
- Roles not in play and phases without handlers are data integrity errors
- Save failures roll back and surface as PersistenceError
- Hypnosis written one night is applied when the next night loads
- Calls for one game are serialised, different games run concurrently
- A handler that corrupts the state fails the night before anything is saved
"""

import asyncio

import pytest

from nightfall.catalog import RoleCatalog, RuleTable
from nightfall.config import EngineConfig
from nightfall.engine import CollectingValidator, GameEngine
from nightfall.events.night_events import NightAction
from nightfall.handlers import HandlerRegistry, HandlerResult
from nightfall.models.player import GameMeta, Player, PlayerStatus
from nightfall.models.role import InputType, Team
from nightfall.models.rules import GameRules, OrderOfOperation, PhaseAction
from nightfall.storage import InMemoryGameRepository, PersistenceError
from nightfall.validation.exceptions import DataIntegrityError, ValidationError


CATALOG = RoleCatalog.load_default()

BASIC_ROSTER = [
    ("S", "Seer"),
    ("Doc", "Doctor"),
    ("AW", "Alpha Wolf"),
    ("V1", "Villager"),
    ("V2", "Villager"),
]


def add_game(
    repository: InMemoryGameRepository,
    game_id: int,
    roster: list[tuple[str, str]],
    meta: list[GameMeta] | None = None,
) -> None:
    """Seed a game with bare player rows (no team, charges or wolf flag)."""
    players = [
        Player(id=index, username=username, role=role_name)
        for index, (username, role_name) in enumerate(roster, start=1)
    ]
    roles = [CATALOG.get_role_by_name(name) for name in dict.fromkeys(r for _, r in roster)]
    repository.add_game(game_id, players, roles, meta or [])


def make_repository(roster: list[tuple[str, str]] = BASIC_ROSTER) -> InMemoryGameRepository:
    repository = InMemoryGameRepository()
    add_game(repository, 1, roster)
    return repository


def action(player_id: int, verb: str, target=None) -> NightAction:
    return NightAction(player_id=player_id, action=verb, target=target)


async def stored(repository: InMemoryGameRepository, username: str, game_id: int = 1) -> Player:
    players = await repository.get_players(game_id)
    return next(p for p in players if p.username == username)


class FailingMetaRepository(InMemoryGameRepository):
    """Repository whose meta write always fails."""

    async def update_game_meta(self, game_id, meta):
        raise RuntimeError("connection reset")


class TrackingRepository(InMemoryGameRepository):
    """Records how many resolution calls overlap.

    A call is active from its first read to its last write.
    """

    def __init__(self):
        super().__init__()
        self.active = 0
        self.max_active = 0

    async def get_players(self, game_id):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.01)
        return await super().get_players(game_id)

    async def update_game_meta(self, game_id, meta):
        await asyncio.sleep(0.01)
        await super().update_game_meta(game_id, meta)
        self.active -= 1


class TestCatalogApi:
    """Role lookups through the engine."""

    def test_role_lookups(self) -> None:
        engine = GameEngine(make_repository())
        assert len(engine.get_all_roles()) == 35
        assert engine.get_role_by_name("Seer").id == 14
        assert engine.get_role_by_id(19).name == "Alpha Wolf"
        assert engine.get_role_by_id(999) is None

    def test_input_requirements(self) -> None:
        engine = GameEngine(make_repository())
        veteran = engine.get_role_by_name("Veteran")

        requirement = engine.get_role_input_requirements(veteran.id)

        assert requirement.input_type == InputType.ALERT_TOGGLE
        assert requirement.options == ["on", "off"]

    @pytest.mark.asyncio
    async def test_validate_action_by_role_id(self) -> None:
        """Test validation through a role id, including unknown ids."""
        engine = GameEngine(make_repository())
        state = await engine.load_game_state(1, 1)
        seer = engine.get_role_by_name("Seer")

        assert engine.validate_action(seer.id, action(1, "investigate", "AW"), state)
        assert not engine.validate_action(seer.id, action(1, "investigate", "Nobody"), state)
        assert not engine.validate_action(999, action(1, "investigate", "AW"), state)


class TestCalculateNightActions:
    """End-to-end resolution."""

    @pytest.mark.asyncio
    async def test_basic_night(self) -> None:
        """Test the Seer/Doctor/Alpha Wolf night end to end."""
        repository = make_repository()
        engine = GameEngine(repository)

        result = await engine.calculate_night_actions(1, 1, [
            action(1, "investigate", "AW"),
            action(2, "heal", "V1"),
            action(3, "kill", "V1"),
        ])

        assert result.deaths == []
        assert [r.result_message for r in result.results_for("S")] == ["Alpha Wolf"]
        assert [r.result_message for r in result.results_for("Doc")] == ["Successfully healed V1"]
        assert (await stored(repository, "V1")).is_alive
        assert (await stored(repository, "AW")).last_target == "V1"

    @pytest.mark.asyncio
    async def test_deaths_are_saved(self) -> None:
        repository = make_repository()
        engine = GameEngine(repository)

        result = await engine.calculate_night_actions(1, 1, [action(3, "kill", "V1")])

        assert [d.player for d in result.deaths] == ["V1"]
        victim = await stored(repository, "V1")
        assert victim.status == PlayerStatus.DEAD
        assert victim.killed_by == "Alpha Wolf"

    @pytest.mark.asyncio
    async def test_strict_engine_clean_night(self) -> None:
        """Test that a strict engine passes a consistent night."""
        engine = GameEngine(make_repository(), config=EngineConfig(strict=True))
        assert isinstance(engine.validator, CollectingValidator)

        result = await engine.calculate_night_actions(1, 1, [action(3, "kill", "V1")])

        assert len(result.deaths) == 1
        assert engine.validator.get_violations() == []

    @pytest.mark.asyncio
    async def test_same_seed_same_result(self) -> None:
        """Test that a seed makes random picks reproducible."""
        roster = [("B", "Bartender"), ("T", "Seer"), ("AW", "Alpha Wolf"), ("Doc", "Doctor")]
        results = []
        for _ in range(2):
            engine = GameEngine(make_repository(roster))
            results.append(await engine.calculate_night_actions(
                1, 1, [action(1, "drink", "T")], seed=1234,
            ))
        assert results[0] == results[1]


class TestLoader:
    """load_game_state."""

    @pytest.mark.asyncio
    async def test_fills_fields_from_role(self) -> None:
        """Test that bare rows get team, wolf flag and charges."""
        repository = make_repository([("H", "Hunter"), ("AW", "Alpha Wolf"), ("SK", "Serial Killer")])
        engine = GameEngine(repository)

        state = await engine.load_game_state(1, 1)

        hunter = state.get_player("H")
        assert hunter.team == Team.TOWN
        assert hunter.charges_left == 1
        assert not hunter.is_wolf
        assert state.get_player("AW").is_wolf
        assert state.get_player("SK").team == Team.NEUTRAL
        assert state.get_player("SK").charges_left is None
        assert [phase.action for phase in state.order_of_operations][-1] == PhaseAction.HEAL

    @pytest.mark.asyncio
    async def test_role_not_in_play(self) -> None:
        """Test that a player holding a role outside the game's roles is fatal."""
        repository = InMemoryGameRepository()
        repository.add_game(
            1,
            [Player(id=1, username="X", role="Seer")],
            [CATALOG.get_role_by_name("Villager")],
        )
        engine = GameEngine(repository)

        with pytest.raises(DataIntegrityError, match="Seer"):
            await engine.load_game_state(1, 1)

    @pytest.mark.asyncio
    async def test_unknown_game(self) -> None:
        engine = GameEngine(make_repository())
        with pytest.raises(PersistenceError):
            await engine.calculate_night_actions(7, 1, [])

    @pytest.mark.asyncio
    async def test_hypnosis_carries_to_next_night(self) -> None:
        """Test that the meta row written tonight is applied tomorrow."""
        repository = make_repository([("HY", "Hypnotist"), ("V1", "Villager"), ("V2", "Villager")])
        engine = GameEngine(repository)

        await engine.calculate_night_actions(1, 1, [action(1, "hypnotize", "V1")])
        state = await engine.load_game_state(1, 2)

        target = state.get_player("V1")
        assert target.hypnotized_by == "HY"
        assert target.hypnotized_until == 2
        assert state.get_player("V2").hypnotized_by is None


class TestSaver:
    """save_game_state."""

    @pytest.mark.asyncio
    async def test_failed_save_rolls_back(self) -> None:
        """Test that a failing write leaves storage untouched."""
        repository = FailingMetaRepository()
        add_game(repository, 1, BASIC_ROSTER)
        engine = GameEngine(repository)

        with pytest.raises(PersistenceError, match="connection reset"):
            await engine.calculate_night_actions(1, 1, [action(3, "kill", "V1")])

        assert (await stored(repository, "V1")).is_alive
        assert (await stored(repository, "AW")).last_target is None


class TestIntegrity:
    """Registry coverage and runtime validation."""

    def test_missing_handlers_fail_construction(self) -> None:
        with pytest.raises(DataIntegrityError, match="No handler registered"):
            GameEngine(make_repository(), registry=HandlerRegistry())

    @pytest.mark.asyncio
    async def test_inconsistent_night_is_not_saved(self) -> None:
        """Test that a handler killing without a Death raises and saves nothing."""

        class SilentKiller:
            role_name = "Alpha Wolf"

            def __call__(self, player, state, night_deaths):
                state.get_player(state.primary_target(player)).status = PlayerStatus.DEAD
                return HandlerResult()

        registry = HandlerRegistry()
        registry.register(PhaseAction.KILL, SilentKiller())
        rule_table = RuleTable(GameRules(order_of_operations=[
            OrderOfOperation(name="Kill", roles=["Alpha Wolf"], action=PhaseAction.KILL),
        ]))
        repository = make_repository()
        engine = GameEngine(repository, rule_table=rule_table, registry=registry)

        with pytest.raises(ValidationError) as excinfo:
            await engine.calculate_night_actions(1, 1, [action(3, "kill", "V1")])

        assert {v.rule_id for v in excinfo.value.violations} == {"S.3"}
        assert (await stored(repository, "V1")).is_alive


class TestLocking:
    """Per-game serialisation."""

    @pytest.mark.asyncio
    async def test_same_game_serialised(self) -> None:
        repository = TrackingRepository()
        add_game(repository, 1, BASIC_ROSTER)
        engine = GameEngine(repository)
        actions = [action(1, "investigate", "AW")]

        await asyncio.gather(
            engine.calculate_night_actions(1, 1, actions),
            engine.calculate_night_actions(1, 1, actions),
        )

        assert repository.max_active == 1

    @pytest.mark.asyncio
    async def test_different_games_concurrent(self) -> None:
        repository = TrackingRepository()
        add_game(repository, 1, BASIC_ROSTER)
        add_game(repository, 2, BASIC_ROSTER)
        engine = GameEngine(repository)
        actions = [action(1, "investigate", "AW")]

        await asyncio.gather(
            engine.calculate_night_actions(1, 1, actions),
            engine.calculate_night_actions(2, 1, actions),
        )

        assert repository.max_active == 2

    @pytest.mark.asyncio
    async def test_locks_released_after_calls(self) -> None:
        """Test that finished games leave no lock behind."""
        repository = make_repository()
        add_game(repository, 2, BASIC_ROSTER)
        engine = GameEngine(repository)
        actions = [action(1, "investigate", "AW")]

        await asyncio.gather(
            engine.calculate_night_actions(1, 1, actions),
            engine.calculate_night_actions(1, 1, actions),
            engine.calculate_night_actions(2, 1, actions),
        )

        assert len(engine._locks) == 0
