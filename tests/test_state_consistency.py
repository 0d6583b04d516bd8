"""Tests for the state consistency (S.1-S.4) and phase order (P.1-P.2) validators."""

from nightfall.catalog import RuleTable
from nightfall.engine.game_state import GameState
from nightfall.events.night_events import Death, NightActionResult
from nightfall.models.player import Player, PlayerStatus
from nightfall.models.rules import OrderOfOperation, PhaseAction
from nightfall.validation import (
    ValidationError,
    ValidationSeverity,
    validate_phase_order,
    validate_state_consistency,
)


def make_test_state(living: list[str], dead: list[str] | None = None) -> GameState:
    """Create a test GameState with Villagers, alive and dead."""
    players = [
        Player(id=index, username=name, role="Villager")
        for index, name in enumerate(living, start=1)
    ]
    for name in dead or []:
        players.append(Player(
            id=len(players) + 1,
            username=name,
            role="Villager",
            status=PlayerStatus.DEAD,
            killed_by="Alpha Wolf",
        ))
    return GameState(game_id=1, players=players)


class TestStateConsistency:
    """S.1-S.4."""

    def test_consistent_night(self) -> None:
        """Test that matching deaths and statuses produce no violations."""
        state = make_test_state(living=["A"], dead=["B"])
        result = NightActionResult(deaths=[Death(player="B", cause="killed")])

        assert validate_state_consistency(state, result, {"A", "B"}) == []

    def test_death_for_living_player(self) -> None:
        """Test S.1 for a Death whose player is still alive."""
        state = make_test_state(living=["A"])
        result = NightActionResult(deaths=[Death(player="A", cause="killed")])

        violations = validate_state_consistency(state, result)

        assert [v.rule_id for v in violations] == ["S.1"]
        assert violations[0].severity == ValidationSeverity.ERROR

    def test_death_for_unknown_player(self) -> None:
        state = make_test_state(living=["A"])
        result = NightActionResult(deaths=[Death(player="Ghost", cause="killed")])

        violations = validate_state_consistency(state, result)

        assert [v.rule_id for v in violations] == ["S.1"]
        assert "unknown player" in violations[0].message

    def test_duplicate_death(self) -> None:
        """Test S.2 for a player listed twice."""
        state = make_test_state(living=[], dead=["B"])
        result = NightActionResult(deaths=[
            Death(player="B", cause="shot"),
            Death(player="B", cause="stabbed"),
        ])

        violations = validate_state_consistency(state, result)

        assert [v.rule_id for v in violations] == ["S.2"]
        assert violations[0].context == {"player": "B", "count": 2}

    def test_silent_death(self) -> None:
        """Test S.3 for a player who died tonight without a Death or killer."""
        state = make_test_state(living=["A"])
        state.get_player("A").status = PlayerStatus.DEAD

        violations = validate_state_consistency(state, NightActionResult(), {"A"})

        assert [v.rule_id for v in violations] == ["S.3", "S.3"]

    def test_earlier_deaths_ignored_by_s3(self) -> None:
        """Test that players dead before tonight need no Death entry."""
        state = make_test_state(living=["A"], dead=["B"])

        assert validate_state_consistency(state, NightActionResult(), {"A"}) == []

    def test_s3_skipped_without_start_roster(self) -> None:
        state = make_test_state(living=["A"])
        state.get_player("A").status = PlayerStatus.DEAD

        assert validate_state_consistency(state, NightActionResult()) == []

    def test_negative_charges(self) -> None:
        """Test S.4."""
        state = make_test_state(living=["A"])
        state.get_player("A").charges_left = -1

        violations = validate_state_consistency(state, NightActionResult())

        assert [v.rule_id for v in violations] == ["S.4"]

    def test_validation_error_lists_violations(self) -> None:
        """Test the exception's rendering."""
        state = make_test_state(living=["A"])
        state.get_player("A").charges_left = -1
        error = ValidationError(validate_state_consistency(state, NightActionResult()))

        assert "1 violation(s) (1 errors)" in error.args[0]
        assert "[ERROR] S.4" in str(error)


class TestPhaseOrder:
    """P.1-P.2."""

    def test_packaged_order_is_clean(self) -> None:
        assert validate_phase_order(RuleTable.load_default().phases) == []

    def test_out_of_order_is_warning(self) -> None:
        """Test P.1 for a heal phase ahead of the kill phase."""
        order = [
            OrderOfOperation(name="Heal", roles=["Doctor"], action=PhaseAction.HEAL),
            OrderOfOperation(name="Kill", roles=["Alpha Wolf"], action=PhaseAction.KILL),
        ]

        violations = validate_phase_order(order)

        assert [v.rule_id for v in violations] == ["P.1"]
        assert violations[0].severity == ValidationSeverity.WARNING

    def test_duplicate_role_is_error(self) -> None:
        """Test P.2 for a role listed twice in one phase."""
        order = [
            OrderOfOperation(name="Info", roles=["Seer", "Framer", "Seer"], action=PhaseAction.INFO),
        ]

        violations = validate_phase_order(order)

        assert [v.rule_id for v in violations] == ["P.2"]
        assert violations[0].severity == ValidationSeverity.ERROR

    def test_same_role_in_two_phases_is_allowed(self) -> None:
        order = [
            OrderOfOperation(name="Light", roles=["Arsonist"], action=PhaseAction.LIGHT),
            OrderOfOperation(name="Kill", roles=["Arsonist"], action=PhaseAction.KILL),
        ]
        assert validate_phase_order(order) == []
