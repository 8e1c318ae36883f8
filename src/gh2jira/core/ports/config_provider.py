"""
Config Provider Port - Abstract interface for loading configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


# Format of the `since` setting and of the persisted sync state.
SINCE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

DEFAULT_SINCE = "1970-01-01T00:00:00+0000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PERIOD = 3600.0
DEFAULT_ISSUE_TYPE = "Task"
DEFAULT_CONFIG_FILE = "config-gh2jira.json"
DEFAULT_STATE_FILE = "gh2jira-state.json"


@dataclass
class GitHubConfig:
    """Connection settings for GitHub."""

    token: str = ""
    repo_name: str = ""
    api_url: str = "https://api.github.com"

    @property
    def owner(self) -> str:
        return self.repo_name.split("/", 1)[0]

    @property
    def repo(self) -> str:
        parts = self.repo_name.split("/", 1)
        return parts[1] if len(parts) == 2 else ""


@dataclass
class JiraConfig:
    """Connection settings for Jira."""

    url: str = ""
    user: str = ""
    api_token: str = ""
    project_key: str = ""
    issue_type: str = DEFAULT_ISSUE_TYPE


@dataclass
class SyncConfig:
    """Behaviour of the sync loop."""

    dry_run: bool = True
    since: datetime = field(default_factory=lambda: datetime(1970, 1, 1, tzinfo=timezone.utc))
    timeout: float = DEFAULT_TIMEOUT
    period: float = DEFAULT_PERIOD
    state_file: Optional[Path] = None
    log_level: str = "INFO"

    @property
    def is_daemon(self) -> bool:
        return self.period > 0


@dataclass
class AppConfig:
    """Complete application configuration."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    jira: JiraConfig = field(default_factory=JiraConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)


class ConfigProviderPort(ABC):
    """Abstract source of configuration values."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load the complete configuration.

        Raises:
            ConfigurationError: If a value cannot be parsed
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a single raw configuration value."""
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """Return a list of validation errors, empty when valid."""
        ...
