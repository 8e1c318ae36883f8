"""
Exceptions - Centralized exception hierarchy for gh2jira.

All errors raised by the core and the adapters derive from Gh2JiraError so
callers can decide, per layer, what is fatal to a pass and what only aborts
the current issue.
"""

from typing import Optional


class Gh2JiraError(Exception):
    """Base class for all gh2jira errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigurationError(Gh2JiraError):
    """Missing or invalid configuration (including unresolved custom fields)."""


class CommentHeaderError(Gh2JiraError):
    """
    A generated comment header could not be decoded.

    Raised when a Jira comment matched a GitHub comment by ID but the full
    header cannot be decomposed. The comment pass for that issue stops.
    """

    def __init__(self, message: str, body: str = "", cause: Optional[Exception] = None):
        super().__init__(message, cause=cause)
        self.body = body


class TrackerError(Gh2JiraError):
    """An operation against GitHub or Jira failed."""

    def __init__(
        self,
        message: str,
        issue_key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.issue_key = issue_key

    def __str__(self) -> str:
        if self.issue_key:
            return f"{self.message} ({self.issue_key})"
        return self.message


class AuthenticationError(TrackerError):
    """Credentials were rejected (HTTP 401)."""


class ForbiddenError(TrackerError):
    """The authenticated user lacks permission (HTTP 403)."""


class NotFoundError(TrackerError):
    """The requested resource does not exist (HTTP 404)."""


class TransientError(TrackerError):
    """A failure worth retrying: connection errors, timeouts, 5xx responses."""


class RateLimitError(TransientError):
    """The API rate limit is exhausted."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        issue_key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, issue_key=issue_key, cause=cause)
        self.retry_after = retry_after


__all__ = [
    "Gh2JiraError",
    "ConfigurationError",
    "CommentHeaderError",
    "TrackerError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "TransientError",
    "RateLimitError",
]
