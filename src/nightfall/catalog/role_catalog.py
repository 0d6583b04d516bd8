"""Role catalog - static role definitions loaded from a document.

The catalog is read once and never mutated. Documents hold the roles under a
``roles`` key, with camelCase field names, as JSON or YAML.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, Optional, Union

import pydantic
import yaml

from nightfall.models.role import InputType, Role, RoleInputRequirement, Team
from nightfall.validation.exceptions import DataIntegrityError

if TYPE_CHECKING:
    from nightfall.engine.game_state import GameState

logger = logging.getLogger(__name__)

DEFAULT_ROLES_FILE = "roles.yaml"

# Symbolic option sources, used when no game state is available
_SYMBOLIC_OPTIONS: dict[InputType, list[str]] = {
    InputType.PLAYER_DROPDOWN: ["alive_players"],
    InputType.TWO_PLAYER_DROPDOWN: ["alive_players"],
    InputType.DEAD_PLAYER_DROPDOWN: ["dead_players"],
    InputType.ROLE_DROPDOWN: ["game_roles"],
    InputType.ALERT_TOGGLE: ["on", "off"],
    InputType.ARSONIST_ACTION: ["douse", "light"],
}


def load_document(path: Union[str, Path]) -> Any:
    """Read a JSON (``.json``) or YAML (anything else) document.

    Raises:
        DataIntegrityError: if the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataIntegrityError(f"Cannot load {path}: {e}") from e


def packaged_data_path(filename: str) -> Path:
    """Path of a data file shipped inside the package."""
    return Path(str(resources.files("nightfall.catalog").joinpath("data", filename)))


class RoleCatalog:
    """All role definitions, looked up by name or id."""

    def __init__(self, roles: list[Role]):
        self._by_name: dict[str, Role] = {}
        self._by_id: dict[int, Role] = {}
        for role in roles:
            if role.name in self._by_name:
                raise DataIntegrityError(f"Duplicate role name: {role.name}")
            if role.id in self._by_id:
                raise DataIntegrityError(f"Duplicate role id: {role.id}")
            self._by_name[role.name] = role
            self._by_id[role.id] = role

    @classmethod
    def from_document(cls, document: Any) -> "RoleCatalog":
        if not isinstance(document, dict) or not isinstance(document.get("roles"), list):
            raise DataIntegrityError("Role document must hold a list under 'roles'")
        try:
            roles = [Role.model_validate(item) for item in document["roles"]]
        except pydantic.ValidationError as e:
            raise DataIntegrityError(f"Malformed role document: {e}") from e
        return cls(roles)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RoleCatalog":
        catalog = cls.from_document(load_document(path))
        logger.debug("Loaded %d roles from %s", len(catalog), path)
        return catalog

    @classmethod
    def load_default(cls) -> "RoleCatalog":
        """Catalog shipped with the package."""
        return cls.from_file(packaged_data_path(DEFAULT_ROLES_FILE))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def all_roles(self) -> list[Role]:
        return sorted(self._by_id.values(), key=lambda role: role.id)

    def get_role_by_name(self, name: str) -> Optional[Role]:
        return self._by_name.get(name)

    def get_role_by_id(self, role_id: int) -> Optional[Role]:
        return self._by_id.get(role_id)

    def roles_for_team(self, team: Team) -> list[Role]:
        return [role for role in self.all_roles() if role.team == team]

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Role]:
        return iter(self.all_roles())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    # ------------------------------------------------------------------
    # Input requirements
    # ------------------------------------------------------------------

    def get_input_requirements(
        self,
        role_id: int,
        state: Optional["GameState"] = None,
    ) -> Optional[RoleInputRequirement]:
        """Describe the night action form for a role.

        Without a game state the options are symbolic ("alive_players",
        "dead_players", "game_roles"); with one they are concrete names.
        """
        role = self.get_role_by_id(role_id)
        if role is None:
            return None

        input_type = role.input_requirements.type
        return RoleInputRequirement(
            role_id=role.id,
            role_name=role.name,
            input_type=input_type,
            description=role.input_requirements.description,
            validation=role.input_requirements.validation,
            options=self._options_for(input_type, state),
            multi_select=input_type == InputType.TWO_PLAYER_DROPDOWN,
            allow_none=input_type == InputType.NONE,
        )

    @staticmethod
    def _options_for(input_type: InputType, state: Optional["GameState"]) -> list[str]:
        if state is None:
            return list(_SYMBOLIC_OPTIONS.get(input_type, []))

        if input_type in (InputType.PLAYER_DROPDOWN, InputType.TWO_PLAYER_DROPDOWN):
            return [p.username for p in state.living_players()]
        if input_type == InputType.DEAD_PLAYER_DROPDOWN:
            return [p.username for p in state.dead_players()]
        if input_type == InputType.ROLE_DROPDOWN:
            return [role.name for role in state.roles if role.name != "Villager"]
        return list(_SYMBOLIC_OPTIONS.get(input_type, []))


__all__ = [
    "RoleCatalog",
    "load_document",
    "packaged_data_path",
]
