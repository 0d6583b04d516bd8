"""Engine configuration.

    roles_path: role catalog document (packaged roles.yaml when unset)
    rules_path: rule table document (packaged rules.yaml when unset)
    seed: default seed for the night's random source
    strict: collect runtime violations and fail the night on any error
"""

from pathlib import Path
from typing import Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict

from nightfall.catalog.role_catalog import RoleCatalog, load_document
from nightfall.catalog.rule_table import RuleTable
from nightfall.validation.exceptions import DataIntegrityError


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    roles_path: Optional[Path] = None
    rules_path: Optional[Path] = None
    seed: Optional[int] = None
    strict: bool = False

    def load_catalog(self) -> RoleCatalog:
        if self.roles_path is None:
            return RoleCatalog.load_default()
        return RoleCatalog.from_file(self.roles_path)

    def load_rule_table(self) -> RuleTable:
        if self.rules_path is None:
            return RuleTable.load_default()
        return RuleTable.from_file(self.rules_path)


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    """Read an EngineConfig from a YAML or JSON file.

    Relative document paths are resolved against the config file's folder.
    An empty file gives the default config.
    """
    path = Path(path)
    document = load_document(path) or {}
    try:
        config = EngineConfig.model_validate(document)
    except pydantic.ValidationError as e:
        raise DataIntegrityError(f"Malformed engine config {path}: {e}") from e

    base = path.parent
    updates = {}
    for field in ("roles_path", "rules_path"):
        value = getattr(config, field)
        if value is not None and not value.is_absolute():
            updates[field] = base / value
    return config.model_copy(update=updates)


__all__ = ["EngineConfig", "load_engine_config"]
