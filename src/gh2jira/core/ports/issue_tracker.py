"""
Issue Tracker Port - Abstract interface for the system issues are mirrored to.

Jira is the only implementation. Custom fields are addressed by logical
FieldName throughout; implementations resolve the numeric field IDs.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..domain.entities import TargetComment, TargetIssue, TargetIssueDraft
from ..exceptions import (
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    TrackerError,
    TransientError,
)


class IssueTrackerPort(ABC):
    """
    Abstract interface for the mirror issue tracker.

    Write operations honour the implementation's dry-run mode: they log what
    would happen and return a best-effort local representation.
    """

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tracker name."""
        ...

    @property
    @abstractmethod
    def project_key(self) -> str:
        """Key of the project issues are mirrored into."""
        ...

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_issues(self, github_ids: Sequence[int]) -> list[TargetIssue]:
        """
        List the project's issues that mirror any of the given GitHub IDs.

        Args:
            github_ids: GitHub issue IDs to look for

        Raises:
            TrackerError: If the search fails
        """
        ...

    @abstractmethod
    def get_issue(self, issue_key: str) -> TargetIssue:
        """Fetch a single issue, including its comments."""
        ...

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def create_issue(self, draft: TargetIssueDraft) -> TargetIssue:
        """Create an issue from a full set of fields."""
        ...

    @abstractmethod
    def update_issue(self, issue_key: str, draft: TargetIssueDraft) -> TargetIssue:
        """Overwrite every field in the draft on an existing issue."""
        ...

    @abstractmethod
    def create_comment(self, issue_key: str, body: str) -> TargetComment:
        """Add a comment to an issue."""
        ...

    @abstractmethod
    def update_comment(self, issue_key: str, comment_id: str, body: str) -> TargetComment:
        """Replace the body of an existing comment."""
        ...


__all__ = [
    "IssueTrackerPort",
    "TrackerError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "TransientError",
]
