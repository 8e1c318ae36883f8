"""
Source Tracker Port - Abstract interface for the system issues are read from.

GitHub is the only implementation; the port keeps the orchestrator free of
HTTP concerns and lets tests feed in-memory snapshots.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..domain.entities import SourceComment, SourceIssue, SourceUser


class SourceTrackerPort(ABC):
    """Read-only access to the authoritative issue tracker."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name."""
        ...

    @abstractmethod
    def list_issues(
        self,
        owner: str,
        repo: str,
        since: Optional[datetime] = None,
    ) -> list[SourceIssue]:
        """
        List issues of a repository, excluding pull requests.

        Args:
            owner: Repository owner
            repo: Repository name
            since: Only issues updated at or after this time, when supported

        Raises:
            TrackerError: If the listing fails
        """
        ...

    @abstractmethod
    def list_comments(
        self,
        owner: str,
        repo: str,
        issue: SourceIssue,
        since: Optional[datetime] = None,
    ) -> list[SourceComment]:
        """List the comments of an issue, oldest first."""
        ...

    @abstractmethod
    def get_user(self, login: str) -> SourceUser:
        """Look up a user's display name and profile URL."""
        ...
