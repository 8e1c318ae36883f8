"""
Environment Config Provider - Load configuration from files, environment and CLI.

Sources, lowest to highest precedence:
- JSON config file (config-gh2jira.json)
- .env file
- Environment variables (GH2JIRA_*, JIRA_URL, JIRA_USER, JIRA_API_TOKEN, GITHUB_TOKEN)
- Command line argument overrides
"""

import json
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ...core.exceptions import ConfigurationError
from ...core.ports.config_provider import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_ISSUE_TYPE,
    DEFAULT_PERIOD,
    DEFAULT_SINCE,
    DEFAULT_STATE_FILE,
    DEFAULT_TIMEOUT,
    SINCE_FORMAT,
    AppConfig,
    ConfigProviderPort,
    GitHubConfig,
    JiraConfig,
    SyncConfig,
)


KNOWN_KEYS = (
    "github_token",
    "github_api_url",
    "repo_name",
    "jira_url",
    "jira_user",
    "jira_api_token",
    "jira_project",
    "jira_issue_type",
    "since",
    "confirm",
    "timeout",
    "period",
    "log_level",
    "state_file",
)

# Key spellings used by older config files.
KEY_ALIASES = {
    "jira_uri": "jira_url",
    "jira_pass": "jira_api_token",
    "jira_password": "jira_api_token",
    "jira_token": "jira_api_token",
    "project_key": "jira_project",
}

# Go-style durations: "30s", "1h", "1.5m", or plain seconds.
_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def normalize_key(key: str) -> str:
    """Map any accepted spelling of a setting to its canonical key."""
    key = key.strip().lower().replace("-", "_")
    return KEY_ALIASES.get(key, key)


def parse_duration(value: Any) -> float:
    """
    Parse a duration in seconds.

    Raises:
        ValueError: If the value isn't a number or a duration like "30s"
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    return float(match.group(1)) * _DURATION_UNITS[match.group(2)]


def parse_since(value: Any) -> datetime:
    """
    Parse a "since" timestamp such as 2019-04-17T16:27:00+0000.

    Raises:
        ValueError: If the value isn't a timestamp with a UTC offset
    """
    if isinstance(value, datetime):
        return value

    text = str(value).strip()
    try:
        return datetime.strptime(text, SINCE_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            raise ValueError(f"Timestamp has no UTC offset: {text!r}")
        return parsed


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that merges a JSON file, a .env file, environment
    variables and CLI overrides.
    """

    ENV_PREFIX = "GH2JIRA_"

    # Unprefixed variables commonly set by other tools.
    ENV_ALIASES = {
        "JIRA_URL": "jira_url",
        "JIRA_USER": "jira_user",
        "JIRA_API_TOKEN": "jira_api_token",
        "GITHUB_TOKEN": "github_token",
    }

    def __init__(
        self,
        config_file: Optional[Path] = None,
        env_file: Optional[Path] = None,
        cli_overrides: Optional[dict[str, Any]] = None,
        environ: Optional[dict[str, str]] = None,
    ):
        """
        Initialize the config provider.

        Args:
            config_file: Path to JSON config file; ./config-gh2jira.json is
                used when present and none is given
            env_file: Path to .env file (auto-detected if not specified)
            cli_overrides: Command line argument overrides; None values are ignored
            environ: Environment mapping, os.environ by default

        Raises:
            ConfigurationError: If an explicitly given config file is
                missing or not a JSON object
        """
        self._values: dict[str, Any] = {}
        self._config_file = config_file
        self._env_file = env_file
        self._environ = os.environ if environ is None else environ
        self._cli_overrides = {
            normalize_key(key): value
            for key, value in (cli_overrides or {}).items()
            if value is not None
        }

        # Load configuration, lowest precedence first
        self._load_config_file()
        self._load_env_file()
        self._load_environment()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Environment"

    def load(self) -> AppConfig:
        """
        Load complete configuration.

        Raises:
            ConfigurationError: If a value can't be parsed
        """
        github = GitHubConfig(
            token=self.get("github_token", ""),
            repo_name=self.get("repo_name", ""),
            api_url=self.get("github_api_url", GitHubConfig.api_url),
        )

        jira = JiraConfig(
            url=self.get("jira_url", ""),
            user=self.get("jira_user", ""),
            api_token=self.get("jira_api_token", ""),
            project_key=self.get("jira_project", ""),
            issue_type=self.get("jira_issue_type", DEFAULT_ISSUE_TYPE),
        )

        try:
            sync = SyncConfig(
                dry_run=not parse_bool(self.get("confirm", False)),
                since=parse_since(self.get("since", DEFAULT_SINCE)),
                timeout=parse_duration(self.get("timeout", DEFAULT_TIMEOUT)),
                period=parse_duration(self.get("period", DEFAULT_PERIOD)),
                state_file=Path(self.get("state_file", DEFAULT_STATE_FILE)),
                log_level=str(self.get("log_level", "INFO")).upper(),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", cause=e) from e

        return AppConfig(github=github, jira=jira, sync=sync)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        key = normalize_key(key)

        # Check CLI overrides first
        if key in self._cli_overrides:
            return self._cli_overrides[key]

        # Check loaded values
        return self._values.get(key, default)

    def validate(self) -> list[str]:
        """Validate configuration."""
        errors = []

        if not self.get("github_token"):
            errors.append("Missing GitHub token - set GITHUB_TOKEN or pass --github-token")

        repo_name = self.get("repo_name") or ""
        parts = repo_name.split("/")
        if len(parts) != 2 or not all(parts):
            errors.append(f"Repository name must look like owner/repo, got {repo_name!r}")

        if not self.get("jira_url"):
            errors.append("Missing JIRA_URL - set in environment, .env or config file")
        if not self.get("jira_user"):
            errors.append("Missing JIRA_USER - set in environment, .env or config file")
        if not self.get("jira_api_token"):
            errors.append("Missing JIRA_API_TOKEN - set in environment, .env or config file")
        if not self.get("jira_project"):
            errors.append("Missing Jira project key - pass --jira-project")

        try:
            parse_since(self.get("since", DEFAULT_SINCE))
        except ValueError:
            errors.append(f"Invalid since timestamp {self.get('since')!r}, expected e.g. {DEFAULT_SINCE}")

        try:
            if parse_duration(self.get("timeout", DEFAULT_TIMEOUT)) <= 0:
                errors.append("Timeout must be positive")
        except ValueError:
            errors.append(f"Invalid timeout {self.get('timeout')!r}, expected seconds or a duration like 30s")

        try:
            if parse_duration(self.get("period", DEFAULT_PERIOD)) < 0:
                errors.append("Period must not be negative")
        except ValueError:
            errors.append(f"Invalid period {self.get('period')!r}, expected seconds or a duration like 1h")

        log_level = str(self.get("log_level", "INFO")).upper()
        if log_level not in LOG_LEVELS:
            errors.append(f"Invalid log level {log_level!r}, expected one of {', '.join(LOG_LEVELS)}")

        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _load_config_file(self) -> None:
        """Load values from the JSON config file."""
        path = self._config_file
        if path is None:
            path = Path.cwd() / DEFAULT_CONFIG_FILE
            if not path.exists():
                return
        elif not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read config file {path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")

        for key, value in data.items():
            self._values[normalize_key(key)] = value

    def _load_env_file(self) -> None:
        """Load values from .env file."""
        env_file = self._find_env_file()
        if not env_file:
            return

        for line in env_file.read_text().splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse key=value
            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            config_key = self._env_key(key.strip())
            if config_key:
                self._values[config_key] = value.strip().strip('"').strip("'")

    def _find_env_file(self) -> Optional[Path]:
        """Find .env file."""
        if self._env_file and self._env_file.exists():
            return self._env_file

        # Check current directory
        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            return cwd_env

        return None

    def _load_environment(self) -> None:
        """Load values from environment variables."""
        for env_key, raw_value in self._environ.items():
            config_key = self._env_key(env_key)
            if config_key:
                self._values[config_key] = raw_value

    def _env_key(self, name: str) -> Optional[str]:
        """Config key for an environment variable name, None if unrelated."""
        upper = name.upper()
        if upper in self.ENV_ALIASES:
            return self.ENV_ALIASES[upper]
        if upper.startswith(self.ENV_PREFIX):
            key = normalize_key(upper[len(self.ENV_PREFIX):])
            if key in KNOWN_KEYS:
                return key
        return None
