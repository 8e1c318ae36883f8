"""
Domain - Entities, value objects and events shared by every layer.
"""

from .entities import (
    SourceComment,
    SourceIssue,
    SourceUser,
    TargetComment,
    TargetIssue,
    TargetIssueDraft,
)
from .events import (
    CommentCreated,
    CommentUpdated,
    DomainEvent,
    EventBus,
    IssueCreated,
    IssueUpdated,
    SyncCompleted,
    SyncStarted,
)
from .value_objects import (
    MISSING,
    FieldName,
    FieldValue,
    Missing,
    Num,
    Str,
    StrList,
    field_value,
)

__all__ = [
    "SourceComment",
    "SourceIssue",
    "SourceUser",
    "TargetComment",
    "TargetIssue",
    "TargetIssueDraft",
    "CommentCreated",
    "CommentUpdated",
    "DomainEvent",
    "EventBus",
    "IssueCreated",
    "IssueUpdated",
    "SyncCompleted",
    "SyncStarted",
    "MISSING",
    "FieldName",
    "FieldValue",
    "Missing",
    "Num",
    "Str",
    "StrList",
    "field_value",
]
