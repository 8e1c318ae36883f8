"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .clock import Clock, FrozenClock, SystemClock
from .config_provider import (
    AppConfig,
    ConfigProviderPort,
    GitHubConfig,
    JiraConfig,
    SyncConfig,
)
from .issue_tracker import IssueTrackerPort
from .source_tracker import SourceTrackerPort

__all__ = [
    "Clock",
    "FrozenClock",
    "SystemClock",
    "AppConfig",
    "ConfigProviderPort",
    "GitHubConfig",
    "JiraConfig",
    "SyncConfig",
    "IssueTrackerPort",
    "SourceTrackerPort",
]
