"""Tests for loading environment definitions."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from env_switcher.config_paths import ENV_ENVIRONMENTS_PATH
from env_switcher.environment import StorageMode
from env_switcher.errors import InvalidConfigFormatError
from env_switcher.loader import load_environments, parse_environments


@pytest.fixture
def definitions_file(tmp_path: Path) -> Path:
    """Write a definitions file with three environments."""
    path = tmp_path / "environments.yml"
    content = {
        "default": "staging",
        "environments": [
            {"name": "dev", "display_name": "Development", "base_url": "https://dev.example.com"},
            {
                "name": "staging",
                "displayName": "Staging",
                "baseUrl": "https://staging.example.com",
                "extras": {"timeout": 20},
            },
            {
                "name": "custom",
                "display_name": "Custom",
                "base_url": "https://custom.example.com",
                "storage_mode": "temporary",
                "requires_credentials": True,
                "credential_fields": [{"key": "token", "label": "Token", "is_password": True}],
            },
        ],
    }
    with open(path, "w") as f:
        yaml.dump(content, f)
    return path


class TestParseEnvironments:
    """Tests for parse_environments."""

    def test_parses_entries(self) -> None:
        envs = parse_environments({"environments": [{"name": "dev"}, {"name": "prod", "base_url": "https://x"}]})
        assert [e.name for e in envs] == ["dev", "prod"]
        assert envs[1].base_url == "https://x"

    @pytest.mark.parametrize(
        "data",
        [
            ["dev", "prod"],
            None,
            {"environments": "dev"},
            {"environments": []},
            {"environments": ["dev"]},
            {"environments": [{"display_name": "No name"}]},
            {"environments": [{"name": "dev", "extras": ["not", "a", "mapping"]}]},
        ],
    )
    def test_rejects_malformed(self, data) -> None:
        with pytest.raises(InvalidConfigFormatError):
            parse_environments(data, path="environments.yml")


class TestLoadEnvironments:
    """Tests for load_environments."""

    def test_load_file(self, definitions_file: Path) -> None:
        result = load_environments(str(definitions_file))

        assert result.success
        assert result.path == str(definitions_file)
        assert [e.name for e in result.environments] == ["dev", "staging", "custom"]
        assert result.default_name == "staging"
        assert result.default_environment is result.environments[1]
        assert result.environments[1].extras == {"timeout": 20}
        assert result.environments[2].storage_mode is StorageMode.TEMPORARY
        assert result.environments[2].credential_fields[0].is_password

    def test_unknown_default_dropped(self, tmp_path: Path) -> None:
        path = tmp_path / "envs.yml"
        path.write_text("default: nope\nenvironments:\n  - name: dev\n")

        result = load_environments(str(path))

        assert result.success
        assert result.default_name is None
        assert result.default_environment is None

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_environments(str(tmp_path / "missing.yml"))
        assert not result.success
        assert "Could not read" in result.error
        assert isinstance(result.exception, OSError)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "envs.yml"
        path.write_text("   \n")
        result = load_environments(str(path))
        assert not result.success
        assert result.error == "Environments file is empty"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "envs.yml"
        path.write_text("environments: [unclosed\n")
        result = load_environments(str(path))
        assert not result.success
        assert isinstance(result.exception, yaml.YAMLError)

    def test_invalid_format(self, tmp_path: Path) -> None:
        path = tmp_path / "envs.yml"
        path.write_text("- dev\n- prod\n")
        result = load_environments(str(path))
        assert not result.success
        assert isinstance(result.exception, InvalidConfigFormatError)

    def test_resolves_path_from_environment_variable(self, definitions_file: Path, tmp_path: Path) -> None:
        with patch("env_switcher.config_paths.platformdirs.user_config_dir", return_value=str(tmp_path / "cfg")):
            with patch.dict(os.environ, {ENV_ENVIRONMENTS_PATH: str(definitions_file)}):
                result = load_environments()

        assert result.success
        assert result.path == str(definitions_file)

    def test_bundled_definitions(self, tmp_path: Path) -> None:
        """Without overrides the bundled example is copied and loaded."""
        config_dir = tmp_path / "cfg"
        with patch("env_switcher.config_paths.platformdirs.user_config_dir", return_value=str(config_dir)):
            with patch.dict(os.environ, {}, clear=False):
                os.environ.pop(ENV_ENVIRONMENTS_PATH, None)
                result = load_environments()

        assert result.success
        assert result.path == str(config_dir / "environments.yml")
        assert [e.name for e in result.environments] == ["dev", "staging", "production", "custom"]
        assert result.default_name == "dev"
