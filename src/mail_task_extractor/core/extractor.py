"""Metadata extraction: title and task fields from sanitized email markdown."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mail_task_extractor.config.settings import MailTaskSettings
from mail_task_extractor.core.dates import DueDateResolver
from mail_task_extractor.core.fields import (
    MetadataField,
    is_blank,
    normalize_email_link,
    normalize_label,
    normalize_priority,
    normalize_smart_list,
    normalize_status,
    normalize_tag,
)
from mail_task_extractor.core.models import FallbackTitle, ResultRecord

logger = logging.getLogger(__name__)

_SUBJECT_LABEL_RE = re.compile(r"^\s*Subject:\s*", re.IGNORECASE)
_FWD_RE = re.compile(r"^FWD:\s*", re.IGNORECASE)
_FW_RE = re.compile(r"^FW:\s*", re.IGNORECASE)


@dataclass(frozen=True)
class FieldRule:
    """How one metadata field's raw line value becomes a record value.

    With ``keep_previous`` set, a line whose value normalizes to None
    leaves the earlier value in place instead of clearing it.
    """

    field: MetadataField
    normalize: Callable[[str], Any]
    keep_previous: bool = False

    @property
    def attribute(self) -> str:
        return self.field.name.lower()


def clean_subject(subject_line: str) -> str:
    """Strip a ``Subject:`` label and a leading ``FWD:``/``FW:`` marker."""
    subject = _SUBJECT_LABEL_RE.sub("", subject_line, count=1)
    subject = _FWD_RE.sub("", subject, count=1)
    subject = _FW_RE.sub("", subject, count=1)
    return subject.strip()


def first_body_line(markdown: str) -> str | None:
    """First non-empty line that is not a metadata field line."""
    for line in markdown.split("\n"):
        line = line.strip()
        if not line:
            continue
        if any(field.is_prefix_of(line) for field in MetadataField):
            continue
        return line
    return None


class MetadataExtractor:
    """Derive a title and the fixed set of task fields from email markdown."""

    def __init__(
        self,
        settings: MailTaskSettings | None = None,
        date_resolver: DueDateResolver | None = None,
    ) -> None:
        self._settings = settings or MailTaskSettings()
        self._date_resolver = date_resolver or DueDateResolver(self._settings.date_format)

    def extract(self, markdown: str, subject_line: str, reference_timestamp: str) -> ResultRecord:
        """Scan *markdown* line by line for metadata fields.

        Every line is tested against every field. When a field appears on
        several lines the last one wins, except that ``Name:`` lines without
        a usable value never replace the title.

        Args:
            markdown: Sanitized email body.
            subject_line: Raw subject header, used for the fallback title.
            reference_timestamp: ISO-8601 "now" with offset, anchors relative dates.

        Returns:
            ResultRecord with all metadata attributes populated or None.
        """
        values: dict[MetadataField, Any] = {field: None for field in MetadataField}
        values[MetadataField.NAME] = self.fallback_title(markdown, subject_line)

        rules = self._rules(reference_timestamp)
        for line in markdown.split("\n"):
            for rule in rules:
                raw = rule.field.match(line)
                if raw is None:
                    continue
                value = rule.normalize(raw)
                if value is None and rule.keep_previous:
                    continue
                values[rule.field] = value

        found = [str(field) for field in MetadataField if values[field] is not None]
        logger.debug("Extracted fields: %s", ", ".join(found))

        return ResultRecord(
            content=markdown,
            **{rule.attribute: values[rule.field] for rule in rules},
        )

    def fallback_title(self, markdown: str, subject_line: str) -> str:
        """Decorated title used when the body has no ``Name:`` line."""
        title = clean_subject(subject_line)
        if self._settings.fallback_title == FallbackTitle.BODY:
            title = first_body_line(markdown) or title
        return self._settings.decorate_title(title)

    def _name(self, value: str) -> str | None:
        if is_blank(value):
            return None
        return self._settings.decorate_title(value)

    def _due(self, reference_timestamp: str) -> Callable[[str], str | None]:
        def resolve(value: str) -> str | None:
            due = self._date_resolver.resolve(value, reference_timestamp)
            logger.debug("Due date result: %s", due)
            return due

        return resolve

    def _rules(self, reference_timestamp: str) -> tuple[FieldRule, ...]:
        return (
            FieldRule(MetadataField.NAME, self._name, keep_previous=True),
            FieldRule(MetadataField.DUE, self._due(reference_timestamp)),
            FieldRule(MetadataField.EMAIL_LINK, normalize_email_link),
            FieldRule(MetadataField.LABEL, normalize_label),
            FieldRule(MetadataField.PRIORITY, normalize_priority),
            FieldRule(MetadataField.SMART_LIST, normalize_smart_list),
            FieldRule(MetadataField.STATUS, normalize_status),
            FieldRule(MetadataField.TAG, normalize_tag),
        )
