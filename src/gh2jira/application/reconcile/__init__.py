"""
Reconcile Module - Pure comparison logic between GitHub and Jira snapshots.

Nothing in here talks to a tracker; the sync orchestrator feeds it lists and
acts on the results.
"""

from .comment_header import (
    MAX_BODY_LENGTH,
    CommentHeader,
    extract_fields,
    extract_id,
    format_comment,
)
from .comments import (
    CommentComparison,
    CommentPair,
    reconcile_comments,
    render_update,
)
from .fields import build_issue_fields, issue_changed, to_jira_labels
from .issues import IssueComparison, IssuePair, compare_issues

__all__ = [
    "MAX_BODY_LENGTH",
    "CommentHeader",
    "extract_fields",
    "extract_id",
    "format_comment",
    "CommentComparison",
    "CommentPair",
    "reconcile_comments",
    "render_update",
    "build_issue_fields",
    "issue_changed",
    "to_jira_labels",
    "IssueComparison",
    "IssuePair",
    "compare_issues",
]
