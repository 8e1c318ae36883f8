"""
Domain Entities - Snapshots of GitHub issues and their Jira mirrors.

Source entities (GitHub) are read-only snapshots fetched once per pass.
Target entities (Jira) are what the sync creates and then updates in place.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .value_objects import MISSING, FieldName, FieldValue


@dataclass(frozen=True)
class SourceUser:
    """A GitHub user, as needed to render a comment header."""

    login: str
    name: str = ""
    url: str = ""


@dataclass(frozen=True)
class SourceComment:
    """A comment on a GitHub issue."""

    id: int
    body: str
    author: str
    created_at: datetime
    url: str = ""


@dataclass(frozen=True)
class SourceIssue:
    """A GitHub issue (pull requests are filtered out by the lister)."""

    id: int
    number: int
    title: str
    body: str = ""
    state: str = "open"
    reporter: str = ""
    labels: tuple[str, ...] = ()
    comment_count: int = 0
    url: str = ""

    def __str__(self) -> str:
        return f"#{self.number}"


@dataclass
class TargetComment:
    """A comment on a Jira issue; generated ones carry a header in the body."""

    id: str
    body: str


@dataclass
class TargetIssue:
    """
    A Jira issue mirroring a GitHub issue.

    Custom fields are keyed by logical FieldName; translating to and from
    `customfield_<N>` keys is the adapter's job.
    """

    key: str
    id: str = ""
    summary: str = ""
    description: str = ""
    issue_type: str = ""
    custom_fields: dict[FieldName, FieldValue] = field(default_factory=dict)
    comments: list[TargetComment] = field(default_factory=list)

    def get_field(self, name: FieldName) -> FieldValue:
        """Get a custom field value, Missing if absent."""
        return self.custom_fields.get(name, MISSING)

    @property
    def github_id(self) -> Optional[int]:
        """The correlation key, or None if absent or not numeric."""
        return self.get_field(FieldName.GITHUB_ID).as_int()

    def __str__(self) -> str:
        return self.key or "<new issue>"


@dataclass
class TargetIssueDraft:
    """
    The full set of fields written on create or update.

    Updates are full overwrites of every tracked field, never patches.
    """

    summary: str
    description: str
    issue_type: str
    custom_fields: dict[FieldName, Any] = field(default_factory=dict)
