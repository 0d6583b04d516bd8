"""Rule table - phase order and resolution policies."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import pydantic

from nightfall.catalog.role_catalog import load_document, packaged_data_path
from nightfall.models.rules import GameRules, OrderOfOperation, PhaseAction
from nightfall.validation.exceptions import DataIntegrityError
from nightfall.validation.phase_order import validate_phase_order
from nightfall.validation.types import errors_only

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = "rules.yaml"


class RuleTable:
    """Wraps the loaded GameRules with a few lookups."""

    def __init__(self, rules: GameRules):
        violations = validate_phase_order(rules.order_of_operations)
        errors = errors_only(violations)
        if errors:
            raise DataIntegrityError(
                "Invalid order of operations: " + "; ".join(v.message for v in errors)
            )
        for violation in violations:
            logger.warning("Rule table %s: %s", violation.rule_id, violation.message)
        self.rules = rules

    @classmethod
    def from_document(cls, document: Any) -> "RuleTable":
        if not isinstance(document, dict):
            raise DataIntegrityError("Rule document must be an object")
        try:
            rules = GameRules.model_validate(document)
        except pydantic.ValidationError as e:
            raise DataIntegrityError(f"Malformed rule document: {e}") from e
        return cls(rules)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RuleTable":
        return cls.from_document(load_document(path))

    @classmethod
    def load_default(cls) -> "RuleTable":
        """Rule table shipped with the package."""
        return cls.from_file(packaged_data_path(DEFAULT_RULES_FILE))

    @property
    def phases(self) -> list[OrderOfOperation]:
        return self.rules.order_of_operations

    def phase_for(self, action: PhaseAction) -> Optional[OrderOfOperation]:
        """First phase with the given action tag."""
        for phase in self.phases:
            if phase.action == action:
                return phase
        return None

    def phases_for_role(self, role_name: str) -> list[OrderOfOperation]:
        return [phase for phase in self.phases if role_name in phase.roles]

    def may_retarget(self, role_name: str) -> bool:
        """Whether a role may pick the same player on consecutive nights."""
        return role_name in self.rules.re_targeting_same_player.allowed_for

    def is_untargetable_at_home(self, role_name: str) -> bool:
        return role_name in self.rules.home_targeting.cannot_be_targeted_at_home


__all__ = ["RuleTable"]
