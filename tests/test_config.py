"""Tests for EngineConfig loading."""

import pytest

from nightfall.config import EngineConfig, load_engine_config
from nightfall.validation.exceptions import DataIntegrityError


class TestEngineConfig:
    """EngineConfig and load_engine_config."""

    def test_defaults_use_packaged_documents(self) -> None:
        config = EngineConfig()
        assert config.strict is False
        assert len(config.load_catalog()) == 35
        assert len(config.load_rule_table().phases) == 6

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "nightfall.yaml"
        path.write_text("")
        assert load_engine_config(path) == EngineConfig()

    def test_relative_paths_resolve_against_config(self, tmp_path) -> None:
        """Test that document paths are relative to the config file's folder."""
        (tmp_path / "data").mkdir()
        (tmp_path / "data" / "roles.yaml").write_text(
            "roles:\n  - {id: 1, name: Villager, team: Town}\n"
        )
        path = tmp_path / "nightfall.yaml"
        path.write_text("roles_path: data/roles.yaml\nseed: 5\nstrict: true\n")

        config = load_engine_config(path)

        assert config.roles_path == tmp_path / "data" / "roles.yaml"
        assert config.seed == 5
        assert config.strict is True
        assert len(config.load_catalog()) == 1

    def test_unknown_key_rejected(self, tmp_path) -> None:
        path = tmp_path / "nightfall.json"
        path.write_text('{"colour": "blue"}')
        with pytest.raises(DataIntegrityError, match="Malformed engine config"):
            load_engine_config(path)
