"""
Sync Orchestrator - Coordinates one GitHub to Jira synchronization pass.

The reconcile functions decide what should change; this is the only place
that turns those decisions into tracker calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...core.domain.entities import SourceComment, SourceIssue, SourceUser, TargetIssue
from ...core.domain.events import (
    CommentCreated,
    CommentUpdated,
    EventBus,
    IssueCreated,
    IssueUpdated,
    SyncCompleted,
    SyncStarted,
)
from ...core.exceptions import CommentHeaderError, TrackerError
from ...core.ports.clock import Clock
from ...core.ports.config_provider import AppConfig
from ...core.ports.issue_tracker import IssueTrackerPort
from ...core.ports.source_tracker import SourceTrackerPort
from ..reconcile import (
    build_issue_fields,
    compare_issues,
    format_comment,
    issue_changed,
    reconcile_comments,
    render_update,
)


@dataclass
class SyncResult:
    """Result of a sync pass."""

    success: bool = True
    dry_run: bool = True

    # Counts
    issues_seen: int = 0
    issues_created: int = 0
    issues_updated: int = 0
    issues_unchanged: int = 0
    comments_created: int = 0
    comments_updated: int = 0
    comments_unchanged: int = 0

    # Details
    created_keys: list[str] = field(default_factory=list)
    updated_keys: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        self.success = False


class SyncOrchestrator:
    """
    Mirrors GitHub issues and their comments into a Jira project.

    A pass:
    1. List GitHub issues updated since the cutoff
    2. List the Jira issues mirroring them
    3. Match the two sets
    4. Create or overwrite each Jira issue, then sync its comments

    Issues are handled one at a time, in GitHub listing order. A failure on
    one issue is recorded and the pass moves on; failing to list either side
    aborts the whole pass.
    """

    def __init__(
        self,
        source: SourceTrackerPort,
        tracker: IssueTrackerPort,
        config: AppConfig,
        clock: Clock,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            source: Where issues are read from (GitHub)
            tracker: Where issues are mirrored to (Jira)
            config: Application configuration
            clock: Source of the last-sync timestamp
            event_bus: Optional event bus
        """
        self.source = source
        self.tracker = tracker
        self.config = config
        self.clock = clock
        self.event_bus = event_bus or EventBus()
        self.logger = logging.getLogger("SyncOrchestrator")

        self._users: dict[str, SourceUser] = {}

    @property
    def dry_run(self) -> bool:
        return self.config.sync.dry_run

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def run_pass(self) -> SyncResult:
        """
        Run one full synchronization pass.

        Returns:
            SyncResult with per-pass counts and per-issue errors

        Raises:
            TrackerError: If either side's issue listing fails
        """
        github = self.config.github
        result = SyncResult(dry_run=self.dry_run)
        self._users = {}

        self.event_bus.publish(SyncStarted(
            repository=github.repo_name,
            project_key=self.tracker.project_key,
            dry_run=self.dry_run,
        ))

        source_issues = self.source.list_issues(
            github.owner, github.repo, since=self.config.sync.since
        )
        result.issues_seen = len(source_issues)

        if not source_issues:
            self.logger.info(f"No GitHub issues in {github.repo_name} since {self.config.sync.since}")
            self._publish_completed(result)
            return result

        self.logger.info(f"Found {len(source_issues)} GitHub issues in {github.repo_name}")

        target_issues = self.tracker.list_issues([issue.id for issue in source_issues])
        self.logger.info(f"Found {len(target_issues)} mirrored issues in Jira")

        comparison = compare_issues(source_issues, target_issues)
        matched = {pair.source.id: pair.target for pair in comparison.to_update}

        for source_issue in source_issues:
            target = matched.get(source_issue.id)
            try:
                if target is None:
                    self._create_issue(source_issue, result)
                else:
                    self._update_issue(source_issue, target, result)
            except (TrackerError, CommentHeaderError) as e:
                label = f"GitHub issue {source_issue}"
                if target is not None:
                    label += f" (Jira {target.key})"
                self.logger.error(f"Error syncing {label}: {e}")
                result.add_error(f"{label}: {e}")

        self._publish_completed(result)
        return result

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    def _create_issue(self, source_issue: SourceIssue, result: SyncResult) -> None:
        draft = build_issue_fields(
            source_issue,
            now=self.clock.now(),
            issue_type=self.config.jira.issue_type,
        )
        created = self.tracker.create_issue(draft)
        self.logger.info(f"Created Jira issue {created} for GitHub issue {source_issue}")

        result.issues_created += 1
        if created.key:
            result.created_keys.append(created.key)
        self.event_bus.publish(IssueCreated(
            github_number=source_issue.number,
            issue_key=created.key or None,
            dry_run=self.dry_run,
        ))

        # A dry-run create returns a local stand-in with nothing to re-fetch
        if not self.dry_run:
            created = self.tracker.get_issue(created.key)

        self._sync_comments(source_issue, created, result)

    def _update_issue(
        self,
        source_issue: SourceIssue,
        target: TargetIssue,
        result: SyncResult,
    ) -> None:
        if issue_changed(source_issue, target):
            draft = build_issue_fields(
                source_issue,
                now=self.clock.now(),
                issue_type=self.config.jira.issue_type,
                include_identity=False,
            )
            self.tracker.update_issue(target.key, draft)
            self.logger.info(f"Updated Jira issue {target.key} from GitHub issue {source_issue}")

            result.issues_updated += 1
            result.updated_keys.append(target.key)
            self.event_bus.publish(IssueUpdated(
                github_number=source_issue.number,
                issue_key=target.key,
                dry_run=self.dry_run,
            ))
        else:
            self.logger.debug(f"Jira issue {target.key} is up to date with GitHub issue {source_issue}")
            result.issues_unchanged += 1

        # Search results don't carry comments; fetch the full issue
        refreshed = self.tracker.get_issue(target.key)
        self._sync_comments(source_issue, refreshed, result)

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def _sync_comments(
        self,
        source_issue: SourceIssue,
        target: TargetIssue,
        result: SyncResult,
    ) -> None:
        if source_issue.comment_count == 0:
            self.logger.debug(f"GitHub issue {source_issue} has no comments")
            return

        github = self.config.github
        source_comments = self.source.list_comments(
            github.owner, github.repo, source_issue, since=self.config.sync.since
        )

        comparison = reconcile_comments(source_comments, target.comments)
        result.comments_unchanged += comparison.unchanged

        for comment in comparison.to_create:
            try:
                self._create_comment(comment, target, result)
            except TrackerError as e:
                self.logger.error(f"Error creating comment {comment.id} on {target}: {e}")
                result.add_error(f"GitHub comment {comment.id} on {target}: {e}")

        for pair in comparison.to_update:
            try:
                user = self._get_user(pair.source.author)
                updated = self.tracker.update_comment(target.key, pair.target.id, render_update(pair, user))
            except TrackerError as e:
                self.logger.error(f"Error updating comment {pair.target.id} on {target}: {e}")
                result.add_error(f"Jira comment {pair.target.id} on {target}: {e}")
                continue

            self.logger.info(f"Updated comment {pair.target.id} on {target} from GitHub comment {pair.source.id}")
            result.comments_updated += 1
            self.event_bus.publish(CommentUpdated(
                issue_key=target.key or None,
                github_comment_id=pair.source.id,
                comment_id=updated.id or pair.target.id,
                dry_run=self.dry_run,
            ))

    def _create_comment(
        self,
        comment: SourceComment,
        target: TargetIssue,
        result: SyncResult,
    ) -> None:
        user = self._get_user(comment.author)
        created = self.tracker.create_comment(target.key, format_comment(comment, user))

        self.logger.info(f"Created comment on {target} for GitHub comment {comment.id}")
        result.comments_created += 1
        self.event_bus.publish(CommentCreated(
            issue_key=target.key or None,
            github_comment_id=comment.id,
            comment_id=created.id or None,
            dry_run=self.dry_run,
        ))

    def _get_user(self, login: str) -> SourceUser:
        """Look up a comment author, once per pass."""
        if login not in self._users:
            self._users[login] = self.source.get_user(login)
        return self._users[login]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _publish_completed(self, result: SyncResult) -> None:
        self.event_bus.publish(SyncCompleted(
            repository=self.config.github.repo_name,
            issues_created=result.issues_created,
            issues_updated=result.issues_updated,
            comments_created=result.comments_created,
            comments_updated=result.comments_updated,
            errors=tuple(result.errors),
        ))
