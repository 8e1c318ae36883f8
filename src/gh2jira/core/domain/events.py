"""
Domain Events - Things that happened during a sync pass.

Each event is an immutable record of a single tracker write or pass boundary.
Events keep the orchestrator decoupled from reporting and audit concerns.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


@dataclass(frozen=True)
class IssueCreated(DomainEvent):
    """Event: A Jira issue was created for a GitHub issue."""

    github_number: int = 0
    issue_key: Optional[str] = None
    dry_run: bool = True


@dataclass(frozen=True)
class IssueUpdated(DomainEvent):
    """Event: A Jira issue was overwritten because its GitHub issue changed."""

    github_number: int = 0
    issue_key: Optional[str] = None
    dry_run: bool = True


@dataclass(frozen=True)
class CommentCreated(DomainEvent):
    """Event: A GitHub comment was mirrored onto a Jira issue."""

    issue_key: Optional[str] = None
    github_comment_id: int = 0
    comment_id: Optional[str] = None
    dry_run: bool = True


@dataclass(frozen=True)
class CommentUpdated(DomainEvent):
    """Event: A mirrored comment was rewritten with the current GitHub body."""

    issue_key: Optional[str] = None
    github_comment_id: int = 0
    comment_id: Optional[str] = None
    dry_run: bool = True


@dataclass(frozen=True)
class SyncStarted(DomainEvent):
    """Event: A sync pass started."""

    repository: str = ""
    project_key: str = ""
    dry_run: bool = True


@dataclass(frozen=True)
class SyncCompleted(DomainEvent):
    """Event: A sync pass completed."""

    repository: str = ""
    issues_created: int = 0
    issues_updated: int = 0
    comments_created: int = 0
    comments_updated: int = 0
    errors: tuple[str, ...] = ()


class EventBus:
    """
    Synchronous publish/subscribe for domain events.

    Handlers run on the publishing thread, in subscription order. Subscribing
    to DomainEvent itself receives every event. Only the most recent
    `max_history` events are kept, since a daemon publishes indefinitely.
    """

    def __init__(self, max_history: int = 1000):
        self._handlers: dict[type, list[Callable[[DomainEvent], None]]] = defaultdict(list)
        self._history: deque[DomainEvent] = deque(maxlen=max_history)

    def subscribe(self, event_type: type, handler: Callable[[DomainEvent], None]) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        self._history.append(event)

        handlers = list(self._handlers.get(type(event), []))
        if type(event) is not DomainEvent:
            handlers += self._handlers.get(DomainEvent, [])

        for handler in handlers:
            handler(event)

    def history(self, event_type: Optional[type] = None) -> list[DomainEvent]:
        """Recent events, oldest first, optionally only those of one type."""
        if event_type is None:
            return list(self._history)
        return [event for event in self._history if isinstance(event, event_type)]
