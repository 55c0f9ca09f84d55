"""Frozen dataclasses and vocabularies for the Mail Task Extractor domain model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class SmartList(StrEnum):
    DO_NEXT = "Do Next"
    DELEGATED = "Delegated"
    SOMEDAY = "Someday"


class Status(StrEnum):
    TO_DO = "To Do"
    DOING = "Doing"
    DONE = "Done"


class FallbackTitle(StrEnum):
    """Where the title comes from when the email has no ``Name:`` line."""

    SUBJECT = "subject"
    BODY = "body"


class MailEmoji(StrEnum):
    """Placement of the mail emoji relative to the title."""

    BEFORE = "before"
    AFTER = "after"
    OMIT = "omit"


class DateFormat(StrEnum):
    """Order of the first two numbers in ``D/D/Y`` dates."""

    US = "us"
    EU = "eu"


@dataclass(frozen=True)
class EmailInput:
    """One email as handed over by the hosting workflow."""

    html_body: str
    subject_line: str
    reference_timestamp: str


@dataclass(frozen=True)
class ResultRecord:
    """Structured task record extracted from one email.

    Every metadata attribute is always present; ``None`` means the email
    did not carry a usable value for that field.
    """

    content: str
    name: str
    due: str | None = None
    email_link: str | None = None
    label: tuple[str, ...] | None = None
    priority: Priority | None = None
    smart_list: SmartList | None = None
    status: Status | None = None
    tag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the record keyed by the field labels used in email text."""
        return {
            "content": self.content,
            "name": self.name,
            "due": self.due,
            "email link": self.email_link,
            "label": list(self.label) if self.label is not None else None,
            "priority": str(self.priority) if self.priority is not None else None,
            "smart list": str(self.smart_list) if self.smart_list is not None else None,
            "status": str(self.status) if self.status is not None else None,
            "tag": self.tag,
        }
