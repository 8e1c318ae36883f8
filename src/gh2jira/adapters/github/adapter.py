"""
GitHub Adapter - Implements SourceTrackerPort for GitHub.

Turns GitHub's issue, comment and user JSON into domain entities.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ...core.domain.entities import SourceComment, SourceIssue, SourceUser
from ...core.ports.clock import Clock
from ...core.ports.config_provider import DEFAULT_TIMEOUT, GitHubConfig
from ...core.ports.source_tracker import SourceTrackerPort
from .client import GitHubApiClient


def format_since(moment: Optional[datetime]) -> Optional[str]:
    """ISO 8601 in UTC, as GitHub's `since` parameter expects."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: str) -> datetime:
    """Parse GitHub's `2019-04-17T16:27:00Z` timestamps."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubAdapter(SourceTrackerPort):
    """
    GitHub implementation of the SourceTrackerPort.

    Translates between GitHub's API and domain entities.
    """

    def __init__(
        self,
        config: GitHubConfig,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Optional[Clock] = None,
        client: Optional[GitHubApiClient] = None,
    ):
        """
        Initialize the GitHub adapter.

        Args:
            config: GitHub configuration
            timeout: Seconds to keep retrying a failing request
            clock: Clock for retry delays
            client: Pre-built API client, mainly for tests
        """
        self.config = config
        self.logger = logging.getLogger("GitHubAdapter")

        self._client = client or GitHubApiClient(
            token=config.token,
            api_url=config.api_url,
            timeout=timeout,
            clock=clock,
        )

    @property
    def name(self) -> str:
        return "GitHub"

    # -------------------------------------------------------------------------
    # SourceTrackerPort Implementation
    # -------------------------------------------------------------------------

    def list_issues(
        self,
        owner: str,
        repo: str,
        since: Optional[datetime] = None,
    ) -> list[SourceIssue]:
        raw_issues = self._client.list_issues(owner, repo, since=format_since(since))

        # The issues endpoint returns pull requests too
        issues = [
            self._parse_issue(data)
            for data in raw_issues
            if not data.get("pull_request")
        ]

        self.logger.debug(
            f"Collected {len(issues)} GitHub issues "
            f"({len(raw_issues) - len(issues)} pull requests skipped)"
        )
        return issues

    def list_comments(
        self,
        owner: str,
        repo: str,
        issue: SourceIssue,
        since: Optional[datetime] = None,
    ) -> list[SourceComment]:
        raw_comments = self._client.list_comments(owner, repo, issue.number, since=format_since(since))
        return [self._parse_comment(data) for data in raw_comments]

    def get_user(self, login: str) -> SourceUser:
        self.logger.debug(f"Retrieving GitHub user ({login})")
        data = self._client.get_user(login)
        return SourceUser(
            login=data.get("login") or login,
            name=data.get("name") or "",
            url=data.get("html_url") or "",
        )

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _parse_issue(self, data: dict[str, Any]) -> SourceIssue:
        """Parse GitHub API response into a SourceIssue."""
        return SourceIssue(
            id=int(data["id"]),
            number=int(data["number"]),
            title=data.get("title") or "",
            body=data.get("body") or "",
            state=data.get("state") or "",
            reporter=(data.get("user") or {}).get("login", ""),
            labels=tuple(label["name"] for label in data.get("labels", []) if label.get("name")),
            comment_count=int(data.get("comments") or 0),
            url=data.get("html_url") or "",
        )

    def _parse_comment(self, data: dict[str, Any]) -> SourceComment:
        """Parse GitHub API response into a SourceComment."""
        return SourceComment(
            id=int(data["id"]),
            body=data.get("body") or "",
            author=(data.get("user") or {}).get("login", ""),
            created_at=parse_timestamp(data["created_at"]),
            url=data.get("html_url") or "",
        )
