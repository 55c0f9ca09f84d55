"""Recognized metadata fields and their value normalizers."""

from __future__ import annotations

import re
from enum import StrEnum
from types import MappingProxyType

from mail_task_extractor.core.models import Priority, SmartList, Status


class MetadataField(StrEnum):
    """The closed set of ``Label: value`` lines recognized in an email body."""

    NAME = "name"
    DUE = "due"
    EMAIL_LINK = "email link"
    LABEL = "label"
    PRIORITY = "priority"
    SMART_LIST = "smart list"
    STATUS = "status"
    TAG = "tag"

    @property
    def pattern(self) -> re.Pattern[str]:
        """Line pattern ``^<label>:\\s*(.+)?$``, case-insensitive."""
        return _FIELD_PATTERNS[self]

    def match(self, line: str) -> str | None:
        """Return the cleaned value if *line* carries this field, else None."""
        found = self.pattern.match(line)
        if found is None:
            return None
        return clean_value(found.group(1))

    def is_prefix_of(self, line: str) -> bool:
        """True if *line* starts with ``<label>:`` regardless of case."""
        return line.lower().startswith(f"{self.value}:")


_FIELD_PATTERNS: dict[MetadataField, re.Pattern[str]] = {
    field: re.compile(rf"^{re.escape(field.value)}:\s*(.+)?$", re.IGNORECASE)
    for field in MetadataField
}


PRIORITY_VOCABULARY: MappingProxyType[str, Priority] = MappingProxyType(
    {
        "high": Priority.HIGH,
        "h": Priority.HIGH,
        "p1": Priority.HIGH,
        "medium": Priority.MEDIUM,
        "m": Priority.MEDIUM,
        "p2": Priority.MEDIUM,
        "low": Priority.LOW,
        "l": Priority.LOW,
        "p3": Priority.LOW,
    }
)

STATUS_VOCABULARY: MappingProxyType[str, Status] = MappingProxyType(
    {
        "to do": Status.TO_DO,
        "todo": Status.TO_DO,
        "td": Status.TO_DO,
        "doing": Status.DOING,
        "done": Status.DONE,
    }
)

SMART_LIST_VOCABULARY: MappingProxyType[str, SmartList] = MappingProxyType(
    {
        "donext": SmartList.DO_NEXT,
        "dn": SmartList.DO_NEXT,
        "do": SmartList.DO_NEXT,
        "do next": SmartList.DO_NEXT,
        "delegated": SmartList.DELEGATED,
        "del": SmartList.DELEGATED,
        "someday": SmartList.SOMEDAY,
        "some": SmartList.SOMEDAY,
        "s": SmartList.SOMEDAY,
    }
)

_PLACEHOLDER_RE = re.compile(r"\{[^}]*\}")
_MARKDOWN_LINK_RE = re.compile(r"\[.*?\]\((.*?)\)")


def clean_value(raw: str | None) -> str:
    """Trim a captured value and drop trailing periods."""
    return (raw or "").strip().rstrip(".")


def is_placeholder(value: str) -> bool:
    """True for an unfilled template token such as ``{Due Date}``."""
    return _PLACEHOLDER_RE.fullmatch(value) is not None


def is_blank(value: str | None) -> bool:
    """True if *value* is missing, empty or a placeholder."""
    return not value or is_placeholder(value)


def _lookup(vocabulary: MappingProxyType, value: str | None):
    if is_blank(value):
        return None
    return vocabulary.get(value.strip().lower())


def normalize_priority(value: str | None) -> Priority | None:
    return _lookup(PRIORITY_VOCABULARY, value)


def normalize_status(value: str | None) -> Status | None:
    return _lookup(STATUS_VOCABULARY, value)


def normalize_smart_list(value: str | None) -> SmartList | None:
    return _lookup(SMART_LIST_VOCABULARY, value)


def normalize_email_link(value: str | None) -> str | None:
    """Return the URL of a markdown link, or the value itself."""
    if is_blank(value):
        return None
    link = _MARKDOWN_LINK_RE.search(value)
    if link:
        return link.group(1).strip()
    return value.strip()


def normalize_label(value: str | None) -> tuple[str, ...] | None:
    """Split a comma-separated label list.

    A present value that holds only separators yields an empty tuple,
    which is distinct from an absent value (None).
    """
    if is_blank(value):
        return None
    return tuple(part.strip() for part in value.split(",") if part.strip())


def normalize_tag(value: str | None) -> str | None:
    if is_blank(value):
        return None
    return value.strip()
