"""
Tests for vert.config.loader module.

Tests configuration loading including:
- Defaults when no file exists
- YAML value validation
- Environment and .env expansion for credentials
- Command-line overrides
- Error handling
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from vert.config import VertConfig, load_config
from vert.discovery import Credentials
from vert.exceptions import ConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test from an empty directory without GitHub variables."""
    monkeypatch.chdir(tmp_path)
    for name in ("GITHUB_ACCOUNT", "GITHUB_TOKEN"):
        # setenv first so teardown also removes values loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestConfigLoading:
    """Tests for basic configuration loading."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.yaml")

        assert config == VertConfig()
        assert config.state_file == Path("state/packages.json")
        assert config.timeout == 30
        assert config.max_workers == 10
        assert config.check_interval == timedelta(hours=2)
        assert config.credentials is None

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "vert.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == VertConfig()

    def test_default_path_in_working_directory(self, create_yaml_file):
        create_yaml_file("vert.yaml", {"timeout": 5})
        assert load_config().timeout == 5

    def test_values_from_file(self, create_yaml_file):
        path = create_yaml_file(
            "vert.yaml",
            {
                "state_file": "data/store.json",
                "timeout": 12.5,
                "max_workers": 4,
                "check_interval_hours": 0.5,
                "github": {"account": "octocat", "token": "s3cret"},
            },
        )

        config = load_config(path)

        assert config.state_file == Path("data/store.json")
        assert config.timeout == 12.5
        assert config.max_workers == 4
        assert config.check_interval == timedelta(minutes=30)
        assert config.credentials == Credentials(account="octocat", token="s3cret")

    def test_state_file_override(self, create_yaml_file):
        path = create_yaml_file("vert.yaml", {"state_file": "data/store.json"})
        config = load_config(path, state_file=Path("other.json"))
        assert config.state_file == Path("other.json")

    def test_token_without_account_is_anonymous(self, create_yaml_file):
        path = create_yaml_file("vert.yaml", {"github": {"token": "s3cret"}})
        assert load_config(path).credentials is None


class TestEnvironmentExpansion:
    """Tests for ${VAR} expansion and .env loading."""

    def test_expand_from_environment(self, create_yaml_file, monkeypatch):
        monkeypatch.setenv("GITHUB_ACCOUNT", "octocat")
        monkeypatch.setenv("GITHUB_TOKEN", "from-env")
        path = create_yaml_file(
            "vert.yaml",
            {"github": {"account": "${GITHUB_ACCOUNT}", "token": "${GITHUB_TOKEN}"}},
        )

        config = load_config(path)

        assert config.github_account == "octocat"
        assert config.github_token == "from-env"

    def test_unset_variable_becomes_none(self, create_yaml_file):
        path = create_yaml_file(
            "vert.yaml",
            {"github": {"account": "octocat", "token": "${GITHUB_TOKEN}"}},
        )

        config = load_config(path)

        assert config.github_token is None
        assert config.credentials == Credentials(account="octocat")

    def test_dotenv_file_loaded(self, tmp_path, create_yaml_file):
        (tmp_path / ".env").write_text("GITHUB_TOKEN=from-dotenv\n", encoding="utf-8")
        path = create_yaml_file(
            "vert.yaml",
            {"github": {"account": "octocat", "token": "${GITHUB_TOKEN}"}},
        )

        config = load_config(path)

        assert config.github_token == "from-dotenv"


class TestConfigErrors:
    """Tests for invalid configuration."""

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "vert.yaml"
        path.write_text("timeout: [1, 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Error parsing YAML"):
            load_config(path)

    def test_top_level_not_mapping(self, create_yaml_file):
        path = create_yaml_file("vert.yaml", ["a", "b"])
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_github_not_mapping(self, create_yaml_file):
        path = create_yaml_file("vert.yaml", {"github": "octocat"})
        with pytest.raises(ConfigError, match="github"):
            load_config(path)

    @pytest.mark.parametrize(
        "data",
        [
            {"timeout": 0},
            {"timeout": -1},
            {"timeout": "30"},
            {"timeout": True},
            {"max_workers": 2.5},
            {"max_workers": 0},
            {"check_interval_hours": "soon"},
        ],
    )
    def test_bad_numbers(self, create_yaml_file, data):
        path = create_yaml_file("vert.yaml", data)
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_string_account(self, create_yaml_file):
        path = create_yaml_file("vert.yaml", {"github": {"account": 42}})
        with pytest.raises(ConfigError, match="github.account"):
            load_config(path)
