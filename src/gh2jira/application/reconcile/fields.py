"""
Issue Field Differ - Detects whether a GitHub issue drifted from its Jira mirror.

The differ answers a single yes/no question. When the answer is yes the
caller rewrites every tracked field, so there is no need to know which one
changed.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from ...core.domain.entities import SourceIssue, TargetIssue, TargetIssueDraft
from ...core.domain.value_objects import FieldName


logger = logging.getLogger("FieldDiffer")

# Format of the last-sync custom field.
SYNC_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.0%z"


def to_jira_labels(labels: Iterable[str]) -> list[str]:
    """Jira's `labels` field type rejects spaces; hyphenate them."""
    return [label.replace(" ", "-") for label in labels]


def _text_changed(source_value: str, target: TargetIssue, name: FieldName) -> bool:
    current = target.get_field(name).as_str()
    if current is None:
        logger.debug(f"{name.value} field is missing on {target}; forcing update")
        return True
    return current != source_value


def _labels_changed(source: SourceIssue, target: TargetIssue) -> bool:
    # Only labels present on GitHub are checked: a label that exists solely on
    # the Jira side never triggers an update by itself.
    if not source.labels:
        return False

    current = target.get_field(FieldName.GITHUB_LABELS).as_str_list()
    if current is None:
        logger.debug(f"GitHub Labels field is not populated on {target}")
        return True

    for label in to_jira_labels(source.labels):
        if label not in current:
            return True
    return False


def issue_changed(source: SourceIssue, target: TargetIssue) -> bool:
    """
    Check whether any tracked attribute differs between the two issues.

    Title, body, state, reporter and labels are compared independently; a
    single difference is enough. Missing or wrongly typed custom fields count
    as differences so a misconfigured issue gets re-synced rather than left
    stale.

    Args:
        source: The GitHub issue
        target: Its Jira mirror

    Returns:
        True if the Jira issue should be overwritten
    """
    logger.debug(f"Comparing GitHub issue {source} and Jira issue {target}")

    changed = [
        source.title != target.summary,
        (source.body or "") != (target.description or ""),
        _text_changed(source.state, target, FieldName.GITHUB_STATUS),
        _text_changed(source.reporter, target, FieldName.GITHUB_REPORTER),
        _labels_changed(source, target),
    ]
    different = any(changed)

    logger.debug(f"Issues have any differences: {different}")
    return different


def build_issue_fields(
    source: SourceIssue,
    now: datetime,
    issue_type: str,
    include_identity: bool = True,
) -> TargetIssueDraft:
    """
    Build the full set of Jira fields mirroring a GitHub issue.

    Args:
        source: The GitHub issue
        now: Value for the last-sync field
        issue_type: Jira issue type name
        include_identity: Whether to set the GitHub ID and number; only done
            on creation since the ID never changes afterwards

    Returns:
        TargetIssueDraft ready for create or update
    """
    custom_fields = {}
    if include_identity:
        custom_fields[FieldName.GITHUB_ID] = source.id
        custom_fields[FieldName.GITHUB_NUMBER] = source.number

    custom_fields[FieldName.GITHUB_STATUS] = source.state
    custom_fields[FieldName.GITHUB_REPORTER] = source.reporter
    custom_fields[FieldName.GITHUB_LABELS] = to_jira_labels(source.labels)
    custom_fields[FieldName.LAST_SYNC] = now.strftime(SYNC_TIME_FORMAT)

    return TargetIssueDraft(
        summary=source.title,
        description=source.body or "",
        issue_type=issue_type,
        custom_fields=custom_fields,
    )
