"""
Comment Header - Correlates Jira comments with the GitHub comments they mirror.

Jira has no way to attach metadata to a comment, so every mirrored comment
starts with a generated header that embeds the GitHub comment ID:

    Comment [(ID 484163403)|<url>] from GitHub user [bilbo|<url>] (Bilbo) at 16:27 PM, April 17 2019:

    <original body>

The grammar must stay byte-compatible with comments created by earlier
versions, otherwise they stop matching and get duplicated.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.domain.entities import SourceComment, SourceUser
from ...core.exceptions import CommentHeaderError


# Jira rejects comment bodies longer than this.
MAX_BODY_LENGTH = 32767

# 24-hour clock followed by an AM/PM marker, e.g. "16:27 PM, April 17 2019".
HEADER_TIME_FORMAT = "%H:%M %p, %B"

_ID_RE = re.compile(r"^Comment \[\(ID ([0-9]+)\)\|")

# Groups: ID, login, display name (optional), timestamp, original body.
_HEADER_RE = re.compile(
    r"Comment \[\(ID ([0-9]+)\)\|[^\]]*\] from GitHub user \[([^|\]]+)\|[^\]]*\]"
    r"(?: \((.*?)\))? at (.+?):\n\n(.*)",
    re.DOTALL,
)


@dataclass(frozen=True)
class CommentHeader:
    """A generated Jira comment body, decomposed."""

    source_id: int
    login: str
    display_name: str
    timestamp: str
    body: str


def extract_id(body: str) -> Optional[int]:
    """
    Quick check: the embedded GitHub comment ID, or None.

    Succeeds only for the exact prefix `Comment [(ID <digits>)|`; a near miss,
    including a non-numeric ID, never yields a partial ID.
    """
    match = _ID_RE.match(body or "")
    if not match:
        return None
    return int(match.group(1))


def extract_fields(body: str) -> CommentHeader:
    """
    Decompose a generated comment body into its header fields and the
    original GitHub comment text.

    The whole body has to match; this is not a line-oriented search.

    Raises:
        CommentHeaderError: If the body is not a well-formed generated comment
    """
    match = _HEADER_RE.fullmatch(body or "")
    if not match:
        raise CommentHeaderError("Comment body does not match the generated header format", body=body)

    source_id, login, display_name, timestamp, original = match.groups()
    return CommentHeader(
        source_id=int(source_id),
        login=login,
        display_name=display_name or "",
        timestamp=timestamp,
        body=original,
    )


def format_timestamp(moment: datetime) -> str:
    """Render a comment creation time the way headers have always shown it."""
    return f"{moment.strftime(HEADER_TIME_FORMAT)} {moment.day} {moment.year}"


def format_header(comment: SourceComment, user: SourceUser) -> str:
    """Build the header line for a mirrored comment, without the body."""
    header = f"Comment [(ID {comment.id})|{comment.url}]"
    header += f" from GitHub user [{user.login}|{user.url}]"
    if user.name:
        header += f" ({user.name})"
    return f"{header} at {format_timestamp(comment.created_at)}:"


def format_comment(comment: SourceComment, user: SourceUser) -> str:
    """
    Build the full Jira comment body for a GitHub comment.

    Bodies over MAX_BODY_LENGTH lose their tail; the header is always kept.
    """
    body = f"{format_header(comment, user)}\n\n{comment.body}"
    if len(body) > MAX_BODY_LENGTH:
        body = body[:MAX_BODY_LENGTH]
    return body
