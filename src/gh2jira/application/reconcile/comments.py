"""
Comment Reconciler - Decides which GitHub comments to create or update in Jira.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from ...core.domain.entities import SourceComment, SourceUser, TargetComment
from .comment_header import (
    MAX_BODY_LENGTH,
    extract_fields,
    extract_id,
    format_comment,
)


logger = logging.getLogger("CommentReconciler")


@dataclass(frozen=True)
class CommentPair:
    """A GitHub comment and the Jira comment that mirrors it."""

    source: SourceComment
    target: TargetComment


@dataclass
class CommentComparison:
    """Outcome of reconciling one issue's comments."""

    to_create: list[SourceComment] = field(default_factory=list)
    to_update: list[CommentPair] = field(default_factory=list)
    unchanged: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.to_create and not self.to_update


def match_comment(
    source: SourceComment,
    targets: Sequence[TargetComment],
) -> Optional[TargetComment]:
    """
    Find the Jira comment mirroring a GitHub comment; first match wins.

    Comments without a generated header, including ones whose ID is not
    numeric, are skipped.
    """
    for target in targets:
        embedded_id = extract_id(target.body)
        if embedded_id is None:
            continue
        if embedded_id == source.id:
            return target
    return None


def needs_update(source: SourceComment, target: TargetComment) -> bool:
    """
    Compare a GitHub comment with the body embedded in its Jira mirror.

    A mirror that was cut at MAX_BODY_LENGTH is current as long as what
    survived is a prefix of the GitHub body.

    Raises:
        CommentHeaderError: If the Jira body can't be decomposed
    """
    mirrored = extract_fields(target.body).body
    if mirrored == source.body:
        return False
    if len(target.body) >= MAX_BODY_LENGTH and source.body.startswith(mirrored):
        return False
    return True


def reconcile_comments(
    source_comments: Sequence[SourceComment],
    target_comments: Sequence[TargetComment],
) -> CommentComparison:
    """
    Partition GitHub comments into ones to create and ones to update.

    Every Jira comment is examined for every GitHub comment; issue-level
    comment counts are small enough that no index is needed. Pairs whose
    bodies already agree are dropped, so re-running a pass is a no-op.

    Args:
        source_comments: GitHub comments, oldest first
        target_comments: Comments currently on the Jira issue

    Returns:
        CommentComparison with the comments to create and pairs to update

    Raises:
        CommentHeaderError: If a matched Jira comment can't be decomposed
    """
    result = CommentComparison()

    for source in source_comments:
        target = match_comment(source, target_comments)
        if target is None:
            result.to_create.append(source)
            continue

        if needs_update(source, target):
            result.to_update.append(CommentPair(source=source, target=target))
        else:
            result.unchanged += 1
            logger.debug(f"Comment {source.id} is already up to date in Jira comment {target.id}")

    return result


def render_update(pair: CommentPair, user: SourceUser) -> str:
    """Regenerate the Jira body for a changed comment, header included."""
    return format_comment(pair.source, user)
