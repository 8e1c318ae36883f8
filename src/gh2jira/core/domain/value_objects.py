"""
Value Objects - Immutable objects defined by their attributes.

Jira custom fields come back from JSON loosely typed: the same GitHub ID may
decode as a float, an int or a string depending on the field configuration.
FieldValue models those values as an explicit tagged union so the rest of
the code never has to guess with isinstance checks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class FieldName(Enum):
    """
    Logical custom fields tracked on every mirrored Jira issue.

    The value is the field name configured in Jira; the numeric
    customfield ID is resolved at runtime from Jira's field metadata.
    """

    GITHUB_ID = "GitHub ID"
    GITHUB_NUMBER = "GitHub Number"
    GITHUB_STATUS = "GitHub Status"
    GITHUB_REPORTER = "GitHub Reporter"
    GITHUB_LABELS = "GitHub Labels"
    LAST_SYNC = "Last Issue-Sync Update"


@dataclass(frozen=True)
class Missing:
    """The field is absent or null on the Jira issue."""

    def as_str(self) -> Optional[str]:
        return None

    def as_int(self) -> Optional[int]:
        return None

    def as_str_list(self) -> Optional[list[str]]:
        return None

    def to_json(self) -> Any:
        return None


@dataclass(frozen=True)
class Str:
    """A plain string value."""

    value: str

    def as_str(self) -> Optional[str]:
        return self.value

    def as_int(self) -> Optional[int]:
        text = self.value.strip()
        if text.isascii() and text.isdigit():
            return int(text)
        return None

    def as_str_list(self) -> Optional[list[str]]:
        return None

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Num:
    """A numeric value, integral or not."""

    value: Union[int, float]

    def as_str(self) -> Optional[str]:
        return None

    def as_int(self) -> Optional[int]:
        if isinstance(self.value, int) or self.value.is_integer():
            return int(self.value)
        return None

    def as_str_list(self) -> Optional[list[str]]:
        return None

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class StrList:
    """A list of strings, e.g. a Jira `labels` typed custom field."""

    values: tuple[str, ...] = field(default_factory=tuple)

    def as_str(self) -> Optional[str]:
        return None

    def as_int(self) -> Optional[int]:
        return None

    def as_str_list(self) -> Optional[list[str]]:
        return list(self.values)

    def to_json(self) -> Any:
        return list(self.values)


FieldValue = Union[Missing, Str, Num, StrList]

MISSING = Missing()


def field_value(raw: Any) -> FieldValue:
    """
    Convert a decoded JSON value into a FieldValue.

    Anything that doesn't fit one of the tagged cases (objects, mixed lists)
    is treated as Missing, which downstream comparisons read as "changed".
    """
    if raw is None:
        return MISSING
    if isinstance(raw, bool):
        return MISSING
    if isinstance(raw, str):
        return Str(raw)
    if isinstance(raw, (int, float)):
        return Num(raw)
    if isinstance(raw, (list, tuple)) and all(isinstance(v, str) for v in raw):
        return StrList(tuple(raw))
    return MISSING
