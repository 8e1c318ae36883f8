"""
Adapters - Concrete implementations of ports.

This module contains implementations for:
- Source tracker: GitHub
- Issue tracker: Jira
- Config: JSON file, .env and environment variables
"""

from .config import EnvironmentConfigProvider
from .github import GitHubAdapter
from .jira import JiraAdapter

__all__ = [
    "EnvironmentConfigProvider",
    "GitHubAdapter",
    "JiraAdapter",
]
