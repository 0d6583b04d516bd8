"""Tests for night action validation predicates.

Tests cover:
- Untargetable-at-home roles are protected from the roles that check it
- Roles outside the UTAH list may target them (known asymmetry)
- Dead-target roles, charge-gated roles, Veteran alert
- Arsonist light/douse, Bloodhound role names, two-target roles
- The same-target-twice restriction
"""

import random

from nightfall.catalog import RoleCatalog, RuleTable
from nightfall.engine.game_state import GameState
from nightfall.events.night_events import NightAction
from nightfall.models.player import Player, PlayerStatus
from nightfall.models.role import Team
from nightfall.validation import UTAH_CHECKING_ROLES, is_retarget_blocked, night_actions, validate_action


CATALOG = RoleCatalog.load_default()
RULES = RuleTable.load_default()


def make_state(roster: list[tuple[str, str]], dead: tuple[str, ...] = ()) -> GameState:
    """Create a GameState from (username, role name) pairs, ids from 1."""
    players = []
    for index, (username, role_name) in enumerate(roster, start=1):
        role = CATALOG.get_role_by_name(role_name)
        players.append(Player(
            id=index,
            username=username,
            role=role_name,
            team=role.team,
            is_wolf=role.team == Team.WOLF,
            charges_left=role.default_charges if role.has_charges else None,
            status=PlayerStatus.DEAD if username in dead else PlayerStatus.ALIVE,
        ))
    roles = [CATALOG.get_role_by_name(name) for name in dict.fromkeys(r for _, r in roster)]
    return GameState(
        game_id=1,
        players=players,
        roles=roles,
        order_of_operations=list(RULES.phases),
        rules=RULES.rules,
        rng=random.Random(1),
    )


def check(state: GameState, username: str, action: str, target=None, secondary=None) -> bool:
    """Validate an action submitted by the named player."""
    actor = state.get_player(username)
    return validate_action(
        CATALOG.get_role_by_name(actor.role),
        NightAction(player_id=actor.id, action=action, target=target, secondary_target=secondary),
        state,
    )


class TestUntargetableAtHome:
    """UTAH checks."""

    def test_utah_roles_reject_sleepwalker(self) -> None:
        """Test that every UTAH-checking role rejects a Sleepwalker target."""
        for role_name in sorted(UTAH_CHECKING_ROLES - {"Matchmaker", "Arsonist"}):
            state = make_state([("X", role_name), ("SW", "Sleepwalker"), ("V1", "Villager")])
            assert not check(state, "X", "act", target="SW"), role_name
            assert check(state, "X", "act", target="V1"), role_name

    def test_other_roles_accept_sleepwalker(self) -> None:
        """Test that roles outside the UTAH list may target them."""
        for role_name in ("Doctor", "Lookout", "Patrolman", "Seer", "Framer", "Locksmith"):
            state = make_state([("X", role_name), ("SW", "Sleepwalker")])
            assert check(state, "X", "act", target="SW"), role_name

    def test_checking_roles_drive_predicates(self, monkeypatch) -> None:
        """Test that the predicates read UTAH_CHECKING_ROLES at call time."""
        state = make_state([("D", "Doctor"), ("SW", "Sleepwalker")])
        assert check(state, "D", "heal", target="SW")

        monkeypatch.setattr(night_actions, "UTAH_CHECKING_ROLES", UTAH_CHECKING_ROLES | {"Doctor"})
        assert not check(state, "D", "heal", target="SW")

        monkeypatch.setattr(night_actions, "UTAH_CHECKING_ROLES", UTAH_CHECKING_ROLES - {"Arsonist"})
        state = make_state([("A", "Arsonist"), ("SW", "Sleepwalker")])
        assert check(state, "A", "douse", target="SW")

    def test_matchmaker_utah(self) -> None:
        """Test that either lover being UTAH rejects the pairing."""
        state = make_state([("MM", "Matchmaker"), ("O", "Orphan"), ("A", "Villager"), ("B", "Villager")])
        assert check(state, "MM", "match", target="A", secondary="B")
        assert not check(state, "MM", "match", target="A", secondary="O")
        assert not check(state, "MM", "match", target="A")


class TestTargets:
    """Alive and dead targets."""

    def test_alive_target_required(self) -> None:
        """Test that alive-target roles reject dead and unknown targets."""
        state = make_state([("S", "Seer"), ("V1", "Villager"), ("V2", "Villager")], dead=("V2",))
        assert check(state, "S", "investigate", target="V1")
        assert not check(state, "S", "investigate", target="V2")
        assert not check(state, "S", "investigate", target="Nobody")

    def test_dead_target_required(self) -> None:
        """Test that Gravedigger and Graverobber need a dead target."""
        state = make_state(
            [("GD", "Gravedigger"), ("GR", "Graverobber"), ("V1", "Villager"), ("V2", "Villager")],
            dead=("V2",),
        )
        assert check(state, "GD", "dig", target="V2")
        assert not check(state, "GD", "dig", target="V1")
        assert check(state, "GR", "rob", target="V2")
        assert not check(state, "GR", "rob", target="V1")

    def test_sleepwalker_needs_two_living_targets(self) -> None:
        """Test the Sleepwalker avoid list."""
        state = make_state([("SW", "Sleepwalker"), ("A", "Villager"), ("B", "Villager")], dead=("B",))
        assert not check(state, "SW", "sleepwalk", target="A", secondary="B")
        assert not check(state, "SW", "sleepwalk", target="A")
        state.get_player("B").status = PlayerStatus.ALIVE
        assert check(state, "SW", "sleepwalk", target="A", secondary="B")


class TestCharges:
    """Charge-gated roles."""

    def test_hunter_without_charge(self) -> None:
        """Test that a spent Hunter cannot shoot."""
        state = make_state([("H", "Hunter"), ("V1", "Villager")])
        assert check(state, "H", "shoot", target="V1")
        state.get_player("H").charges_left = 0
        assert not check(state, "H", "shoot", target="V1")

    def test_stalker_and_glutton_need_charges(self) -> None:
        """Test the other charge-gated killers."""
        state = make_state([("ST", "Stalker"), ("G", "Glutton"), ("V1", "Villager")])
        assert check(state, "ST", "stalk", target="V1")
        assert check(state, "G", "eat", target="V1")
        state.get_player("ST").charges_left = 0
        state.get_player("G").charges_left = 0
        assert not check(state, "ST", "stalk", target="V1")
        assert not check(state, "G", "eat", target="V1")

    def test_veteran_alert(self) -> None:
        """Test that Veteran needs 'alert' and a charge."""
        state = make_state([("VET", "Veteran")])
        assert check(state, "VET", "alert")
        assert not check(state, "VET", "off")
        state.get_player("VET").charges_left = 0
        assert not check(state, "VET", "alert")


class TestSpecialActions:
    """Arsonist, Bloodhound, no-action roles."""

    def test_arsonist_light_needs_doused_player(self) -> None:
        """Test that lighting with nobody doused is invalid."""
        state = make_state([("A", "Arsonist"), ("V1", "Villager")])
        assert not check(state, "A", "light")
        state.get_player("V1").is_doused = True
        assert check(state, "A", "light")

    def test_arsonist_douse(self) -> None:
        """Test douse targeting, including UTAH."""
        state = make_state([("A", "Arsonist"), ("V1", "Villager"), ("O", "Orphan")])
        assert check(state, "A", "douse", target="V1")
        assert not check(state, "A", "douse", target="O")
        assert not check(state, "A", "dance", target="V1")

    def test_bloodhound_role_names(self) -> None:
        """Test that the Bloodhound picks a role in play, never Villager."""
        state = make_state([("BH", "Bloodhound"), ("AW", "Alpha Wolf"), ("V1", "Villager")])
        assert check(state, "BH", "track", target="Alpha Wolf")
        assert not check(state, "BH", "track", target="Villager")
        assert not check(state, "BH", "track", target="Doctor")
        assert not check(state, "BH", "track")

    def test_empty_action_is_invalid(self) -> None:
        """Test that an empty action string is rejected for any role."""
        state = make_state([("V1", "Villager"), ("S", "Seer")])
        assert not check(state, "V1", "")
        assert not check(state, "S", "", target="V1")

    def test_roles_without_predicate_are_valid(self) -> None:
        """Test that roles with no restriction accept any action."""
        state = make_state([("V1", "Villager"), ("M", "Mayor")])
        assert check(state, "V1", "none")
        assert check(state, "M", "none")


class TestRetargeting:
    """Same target on consecutive nights."""

    def test_doctor_cannot_retarget(self) -> None:
        """Test that the Doctor must pick a different player."""
        state = make_state([("Doc", "Doctor"), ("V1", "Villager"), ("V2", "Villager")])
        state.get_player("Doc").last_target = "V1"
        assert not check(state, "Doc", "heal", target="V1")
        assert check(state, "Doc", "heal", target="V2")

    def test_seer_may_retarget(self) -> None:
        """Test that listed roles may pick the same player again."""
        state = make_state([("S", "Seer"), ("V1", "Villager")])
        state.get_player("S").last_target = "V1"
        assert check(state, "S", "investigate", target="V1")

    def test_retarget_ignores_non_player_targets(self) -> None:
        """Test that role-name targets never count as a repeat."""
        state = make_state([("Doc", "Doctor"), ("V1", "Villager")])
        doctor = state.get_player("Doc")
        doctor.last_target = "V1"
        action = NightAction(player_id=doctor.id, action="heal", target="Seer")
        assert not is_retarget_blocked(CATALOG.get_role_by_name("Doctor"), action, state)
