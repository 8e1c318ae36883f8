"""
Issue Reconciler - Matches GitHub issues to the Jira issues mirroring them.

Matching is done on two in-memory lists, with no I/O, so the decision logic
can be tested without any tracker.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from ...core.domain.entities import SourceIssue, TargetIssue


logger = logging.getLogger("IssueReconciler")


@dataclass(frozen=True)
class IssuePair:
    """A GitHub issue and its existing Jira mirror."""

    source: SourceIssue
    target: TargetIssue


@dataclass
class IssueComparison:
    """Outcome of matching GitHub issues against Jira issues."""

    to_create: list[SourceIssue] = field(default_factory=list)
    to_update: list[IssuePair] = field(default_factory=list)


def match_issue(source: SourceIssue, targets: Sequence[TargetIssue]) -> Optional[TargetIssue]:
    """
    Find the Jira issue whose GitHub ID field equals the issue's ID.

    Jira issues whose GitHub ID is missing or not numeric never match; they
    are logged and skipped. First match wins.
    """
    for target in targets:
        github_id = target.github_id
        if github_id is None:
            logger.debug(f"GitHub ID custom field is missing or not numeric on {target}")
            continue
        if github_id == source.id:
            return target
    return None


def compare_issues(
    source_issues: Sequence[SourceIssue],
    target_issues: Sequence[TargetIssue],
) -> IssueComparison:
    """
    Partition GitHub issues into ones to create and ones to update.

    Input order is preserved in both lists. The scan is a plain nested loop;
    a single repository's issue volume keeps it cheap.

    Args:
        source_issues: GitHub issues
        target_issues: Candidate Jira issues

    Returns:
        IssueComparison with issues to create and pairs to update
    """
    result = IssueComparison()

    for source in source_issues:
        target = match_issue(source, target_issues)
        if target is None:
            result.to_create.append(source)
        else:
            logger.debug(f"Matched GitHub issue {source} to Jira issue {target}")
            result.to_update.append(IssuePair(source=source, target=target))

    return result
