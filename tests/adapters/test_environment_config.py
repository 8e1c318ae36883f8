"""Tests for the layered configuration provider."""

import json
from datetime import datetime, timezone

import pytest

from gh2jira.adapters.config.environment import (
    EnvironmentConfigProvider,
    normalize_key,
    parse_duration,
    parse_since,
)
from gh2jira.core.exceptions import ConfigurationError


VALID_ENV = {
    "GITHUB_TOKEN": "ghp_token",
    "GH2JIRA_REPO_NAME": "owner/repo",
    "JIRA_URL": "https://jira.example.com",
    "JIRA_USER": "bot@example.com",
    "JIRA_API_TOKEN": "secret",
    "GH2JIRA_JIRA_PROJECT": "PROJ",
}


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    """Run every test where no stray config-gh2jira.json or .env exists."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_config(path, data):
    path.write_text(json.dumps(data))
    return path


class TestParsers:
    """Tests for value parsing helpers."""

    @pytest.mark.parametrize("value, expected", [
        (30, 30.0),
        (2.5, 2.5),
        ("45", 45.0),
        ("30s", 30.0),
        ("1.5m", 90.0),
        ("1h", 3600.0),
        ("250ms", 0.25),
        ("0", 0.0),
    ])
    def test_parse_duration(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["soon", "1d", "-5", "", True])
    def test_parse_duration_rejects(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)

    def test_parse_since(self):
        assert parse_since("2019-04-17T16:27:00+0000") == datetime(2019, 4, 17, 16, 27, tzinfo=timezone.utc)

    def test_parse_since_iso(self):
        assert parse_since("2019-04-17T16:27:00Z") == datetime(2019, 4, 17, 16, 27, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["2019-04-17T16:27:00", "yesterday"])
    def test_parse_since_rejects(self, value):
        with pytest.raises(ValueError):
            parse_since(value)

    def test_normalize_key(self):
        assert normalize_key("repo-name") == "repo_name"
        assert normalize_key("jira-uri") == "jira_url"
        assert normalize_key("JIRA_PASS") == "jira_api_token"


class TestPrecedence:
    """Config file < .env < environment < command line."""

    def test_config_file_only(self, workdir):
        config_file = write_config(workdir / "gh2jira.json", {"repo-name": "file/repo"})

        provider = EnvironmentConfigProvider(config_file=config_file, environ={})

        assert provider.get("repo_name") == "file/repo"

    def test_default_config_file_is_picked_up(self, workdir):
        write_config(workdir / "config-gh2jira.json", {"jira-uri": "https://jira.example.com"})

        provider = EnvironmentConfigProvider(environ={})

        assert provider.get("jira_url") == "https://jira.example.com"

    def test_env_file_beats_config_file(self, workdir):
        config_file = write_config(workdir / "gh2jira.json", {"repo_name": "file/repo"})
        (workdir / ".env").write_text('# comment\nGH2JIRA_REPO_NAME="dotenv/repo"\nnot a pair\n')

        provider = EnvironmentConfigProvider(config_file=config_file, environ={})

        assert provider.get("repo_name") == "dotenv/repo"

    def test_environment_beats_env_file(self, workdir):
        (workdir / ".env").write_text("GH2JIRA_REPO_NAME=dotenv/repo\n")

        provider = EnvironmentConfigProvider(environ={"GH2JIRA_REPO_NAME": "env/repo"})

        assert provider.get("repo_name") == "env/repo"

    def test_cli_beats_environment(self):
        provider = EnvironmentConfigProvider(
            environ={"GH2JIRA_REPO_NAME": "env/repo"},
            cli_overrides={"repo_name": "cli/repo", "jira_project": None},
        )

        assert provider.get("repo_name") == "cli/repo"

    def test_unset_cli_values_fall_through(self):
        provider = EnvironmentConfigProvider(
            environ={"GH2JIRA_JIRA_PROJECT": "PROJ"},
            cli_overrides={"jira_project": None},
        )

        assert provider.get("jira_project") == "PROJ"

    def test_unrelated_environment_is_ignored(self):
        provider = EnvironmentConfigProvider(environ={"HOME": "/root", "GH2JIRA_BOGUS": "x"})

        assert provider.get("home") is None
        assert provider.get("bogus") is None


class TestConfigFileErrors:
    """Tests for unusable config files."""

    def test_missing_explicit_file(self, workdir):
        with pytest.raises(ConfigurationError):
            EnvironmentConfigProvider(config_file=workdir / "missing.json", environ={})

    def test_invalid_json(self, workdir):
        config_file = workdir / "broken.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigurationError):
            EnvironmentConfigProvider(config_file=config_file, environ={})

    def test_not_an_object(self, workdir):
        config_file = write_config(workdir / "list.json", ["a"])

        with pytest.raises(ConfigurationError):
            EnvironmentConfigProvider(config_file=config_file, environ={})


class TestLoad:
    """Tests for building AppConfig."""

    def test_defaults(self):
        config = EnvironmentConfigProvider(environ=dict(VALID_ENV)).load()

        assert config.github.owner == "owner"
        assert config.github.repo == "repo"
        assert config.jira.project_key == "PROJ"
        assert config.jira.issue_type == "Task"
        assert config.sync.dry_run is True
        assert config.sync.since == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert config.sync.timeout == 30.0
        assert config.sync.period == 3600.0
        assert config.sync.is_daemon
        assert config.sync.state_file.name == "gh2jira-state.json"

    def test_confirm_and_durations(self):
        env = dict(VALID_ENV, GH2JIRA_CONFIRM="true", GH2JIRA_TIMEOUT="10s", GH2JIRA_PERIOD="0")

        config = EnvironmentConfigProvider(environ=env).load()

        assert config.sync.dry_run is False
        assert config.sync.timeout == 10.0
        assert not config.sync.is_daemon

    def test_cli_confirm_flag(self):
        config = EnvironmentConfigProvider(
            environ=dict(VALID_ENV),
            cli_overrides={"confirm": True, "since": "2019-04-17T16:27:00+0000"},
        ).load()

        assert config.sync.dry_run is False
        assert config.sync.since == datetime(2019, 4, 17, 16, 27, tzinfo=timezone.utc)

    def test_log_level_is_upper_cased(self):
        config = EnvironmentConfigProvider(environ=dict(VALID_ENV, GH2JIRA_LOG_LEVEL="debug")).load()

        assert config.sync.log_level == "DEBUG"

    def test_bad_value(self):
        provider = EnvironmentConfigProvider(environ=dict(VALID_ENV, GH2JIRA_TIMEOUT="soon"))

        with pytest.raises(ConfigurationError):
            provider.load()


class TestValidate:
    """Tests for configuration validation."""

    def test_valid(self):
        assert EnvironmentConfigProvider(environ=dict(VALID_ENV)).validate() == []

    def test_everything_missing(self):
        errors = EnvironmentConfigProvider(environ={}).validate()

        assert len(errors) == 6
        assert any("GitHub token" in e for e in errors)
        assert any("owner/repo" in e for e in errors)
        assert any("JIRA_URL" in e for e in errors)

    @pytest.mark.parametrize("repo_name", ["repo", "owner/", "/repo", "a/b/c"])
    def test_bad_repo_name(self, repo_name):
        env = dict(VALID_ENV, GH2JIRA_REPO_NAME=repo_name)

        errors = EnvironmentConfigProvider(environ=env).validate()

        assert len(errors) == 1
        assert "owner/repo" in errors[0]

    @pytest.mark.parametrize("key, value", [
        ("GH2JIRA_SINCE", "yesterday"),
        ("GH2JIRA_TIMEOUT", "0"),
        ("GH2JIRA_TIMEOUT", "soon"),
        ("GH2JIRA_PERIOD", "forever"),
        ("GH2JIRA_LOG_LEVEL", "chatty"),
    ])
    def test_bad_sync_settings(self, key, value):
        errors = EnvironmentConfigProvider(environ=dict(VALID_ENV, **{key: value})).validate()

        assert len(errors) == 1
