"""
Jira Adapter - Implements IssueTrackerPort for Atlassian Jira.

This is the main entry point for Jira integration. Custom fields cross the
boundary here: outgoing drafts are keyed by FieldName and become
`customfield_<N>` keys, incoming issue JSON goes the other way and every
value is wrapped as a FieldValue.
"""

import logging
import re
from collections.abc import Sequence
from typing import Any, Optional

from ...core.domain.entities import TargetComment, TargetIssue, TargetIssueDraft
from ...core.domain.value_objects import FieldName, field_value
from ...core.ports.clock import Clock
from ...core.ports.config_provider import DEFAULT_TIMEOUT, JiraConfig
from ...core.ports.issue_tracker import IssueTrackerPort
from .client import JiraApiClient
from .fields import FieldResolver


# Past this many IDs the `in (...)` clause makes the request too large, so
# the whole project is searched and filtered locally.
MAX_JQL_IDS = 100

_NEWLINE_RE = re.compile(r"\r?\n")


def build_jql(project_key: str, field_id: str, github_ids: Sequence[int]) -> str:
    """
    Build the search for the Jira issues mirroring the given GitHub IDs.

    Args:
        project_key: Jira project key
        field_id: Numeric ID of the GitHub ID custom field
        github_ids: GitHub issue IDs

    Returns:
        JQL string
    """
    if len(github_ids) < MAX_JQL_IDS:
        ids = ",".join(str(github_id) for github_id in github_ids)
        return f"project='{project_key}' AND cf[{field_id}] in ({ids})"
    return f"project='{project_key}'"


def truncate(text: Optional[str], length: int) -> str:
    """Single-line preview of a possibly long text, for dry-run output."""
    if not text:
        return "empty"
    text = _NEWLINE_RE.sub("\\\\n", text)
    if len(text) <= length:
        return text
    return f"{text[:length]}..."


class JiraAdapter(IssueTrackerPort):
    """
    Jira implementation of the IssueTrackerPort.

    Translates between domain entities and Jira's API.
    """

    BASE_FIELDS = ["summary", "description", "issuetype"]

    def __init__(
        self,
        config: JiraConfig,
        dry_run: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Optional[Clock] = None,
        client: Optional[JiraApiClient] = None,
    ):
        """
        Initialize the Jira adapter.

        Args:
            config: Jira configuration
            dry_run: If True, don't make changes
            timeout: Seconds to keep retrying a failing request
            clock: Clock for retry delays
            client: Pre-built API client, mainly for tests
        """
        self.config = config
        self._dry_run = dry_run
        self.logger = logging.getLogger("JiraAdapter")

        self._client = client or JiraApiClient(
            base_url=config.url,
            user=config.user,
            api_token=config.api_token,
            dry_run=dry_run,
            timeout=timeout,
            clock=clock,
        )
        self.fields = FieldResolver(self._client)
        self._project: Optional[dict[str, Any]] = None

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Jira"

    @property
    def project_key(self) -> str:
        return self.config.project_key

    def get_project(self) -> dict[str, Any]:
        """
        Fetch the configured project, once.

        Raises:
            NotFoundError: If the project doesn't exist
        """
        if self._project is None:
            self._project = self._client.get_project(self.project_key)
        return self._project

    def validate(self) -> None:
        """
        Check the project exists and every custom field can be resolved.

        Raises:
            ConfigurationError: If a custom field is missing
            TrackerError: If Jira can't be reached or the project is unknown
        """
        project = self.get_project()
        self.fields.resolve()
        self.logger.debug(f"Using Jira project {project.get('key', self.project_key)}")

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def list_issues(self, github_ids: Sequence[int]) -> list[TargetIssue]:
        jql = build_jql(
            self.project_key,
            self.fields.field_id(FieldName.GITHUB_ID),
            github_ids,
        )
        self.logger.debug(f"JQL query used: {jql}")

        raw_issues = self._client.search_jql(jql, self._field_list())
        issues = [self._parse_issue(data) for data in raw_issues]

        if len(github_ids) < MAX_JQL_IDS:
            return issues

        # Already filtered by the JQL otherwise
        wanted = set(github_ids)
        return [issue for issue in issues if issue.github_id in wanted]

    def get_issue(self, issue_key: str) -> TargetIssue:
        data = self._client.get(
            f"issue/{issue_key}",
            params={"fields": ",".join(self._field_list() + ["comment"])},
        )
        return self._parse_issue(data)

    # -------------------------------------------------------------------------
    # IssueTrackerPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def create_issue(self, draft: TargetIssueDraft) -> TargetIssue:
        if self._dry_run:
            self._log_draft("Create new Jira issue:", draft)
            return self._from_draft("", draft)

        fields = self._draft_fields(draft)
        fields["project"] = {"key": self.project_key}

        component = self._default_component()
        if component:
            fields["components"] = [component]

        result = self._client.post("issue", json={"fields": fields})
        issue = self._from_draft(result.get("key", ""), draft, issue_id=str(result.get("id", "")))

        self.logger.info(f"Created {issue.key}")
        return issue

    def update_issue(self, issue_key: str, draft: TargetIssueDraft) -> TargetIssue:
        if self._dry_run:
            self._log_draft(f"Update Jira issue {issue_key}:", draft)
            return self._from_draft(issue_key, draft)

        self._client.put(f"issue/{issue_key}", json={"fields": self._draft_fields(draft)})
        self.logger.info(f"Updated {issue_key}")
        return self._from_draft(issue_key, draft)

    def create_comment(self, issue_key: str, body: str) -> TargetComment:
        if self._dry_run:
            self.logger.info(f"[DRY-RUN] Would add comment to {issue_key}: {truncate(body, 100)}")
            return TargetComment(id="", body=body)

        result = self._client.post(f"issue/{issue_key}/comment", json={"body": body})
        self.logger.info(f"Added comment to {issue_key}")
        return TargetComment(id=str(result.get("id", "")), body=result.get("body", body))

    def update_comment(self, issue_key: str, comment_id: str, body: str) -> TargetComment:
        if self._dry_run:
            self.logger.info(
                f"[DRY-RUN] Would update comment {comment_id} on {issue_key}: {truncate(body, 100)}"
            )
            return TargetComment(id=comment_id, body=body)

        # The comment endpoint takes the body alone, not a `fields` wrapper
        self._client.put(f"issue/{issue_key}/comment/{comment_id}", json={"body": body})
        self.logger.info(f"Updated comment {comment_id} on {issue_key}")
        return TargetComment(id=comment_id, body=body)

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _field_list(self) -> list[str]:
        return self.BASE_FIELDS + sorted(self.fields.keys())

    def _draft_fields(self, draft: TargetIssueDraft) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "summary": draft.summary,
            "description": draft.description,
            "issuetype": {"name": draft.issue_type},
        }
        for name, value in draft.custom_fields.items():
            fields[self.fields.field_key(name)] = value
        return fields

    def _default_component(self) -> Optional[dict[str, str]]:
        components = self.get_project().get("components") or []
        if not components:
            return None
        first = components[0]
        return {"id": str(first.get("id", "")), "name": first.get("name", "")}

    def _parse_issue(self, data: dict) -> TargetIssue:
        """Parse Jira API response into a TargetIssue."""
        fields = data.get("fields", {})

        custom_fields = {
            name: field_value(fields.get(key))
            for key, name in self.fields.keys().items()
        }

        comments = [
            TargetComment(id=str(c.get("id", "")), body=c.get("body") or "")
            for c in (fields.get("comment") or {}).get("comments", [])
        ]

        return TargetIssue(
            key=data.get("key", ""),
            id=str(data.get("id", "")),
            summary=fields.get("summary") or "",
            description=fields.get("description") or "",
            issue_type=(fields.get("issuetype") or {}).get("name", ""),
            custom_fields=custom_fields,
            comments=comments,
        )

    def _from_draft(self, key: str, draft: TargetIssueDraft, issue_id: str = "") -> TargetIssue:
        return TargetIssue(
            key=key,
            id=issue_id,
            summary=draft.summary,
            description=draft.description,
            issue_type=draft.issue_type,
            custom_fields={name: field_value(value) for name, value in draft.custom_fields.items()},
        )

    def _log_draft(self, title: str, draft: TargetIssueDraft) -> None:
        self.logger.info(f"[DRY-RUN] {title}")
        self.logger.info(f"  Summary: {draft.summary}")
        self.logger.info(f"  Description: {truncate(draft.description, 50)}")
        for name, value in draft.custom_fields.items():
            self.logger.info(f"  {name.value}: {value}")
