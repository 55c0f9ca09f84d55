"""Integration tests for EmailTaskProcessor."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mail_task_extractor.config.settings import MailTaskSettings
from mail_task_extractor.core.exceptions import InputError, MailTaskError
from mail_task_extractor.core.models import (
    EmailInput,
    Priority,
    ResultRecord,
    SmartList,
    Status,
)
from mail_task_extractor.pipeline.processor import EmailTaskProcessor, process_email


class TestProcessTaskEmail:
    """End-to-end run over the task fixture."""

    def test_record_fields(self, task_email: EmailInput) -> None:
        record = EmailTaskProcessor().process(task_email)

        assert isinstance(record, ResultRecord)
        assert record.name == "✉️ Renew passport"
        assert record.due == "2024-12-25"
        assert record.email_link == "https://mail.example.com/msg/123"
        assert record.priority == Priority.HIGH
        assert record.status == Status.DOING
        assert record.smart_list == SmartList.DO_NEXT
        assert record.label == ("Errands", "Travel")
        assert record.tag is None

    def test_content_is_sanitized(self, task_email: EmailInput) -> None:
        record = EmailTaskProcessor().process(task_email)

        assert "trackOpen" not in record.content
        assert "color: red" not in record.content
        assert "convertkit" not in record.content
        assert "t.gif" not in record.content
        assert "![Form](https://example.com/photos/form.png)" in record.content
        assert "Remember to bring the old passport." in record.content

    def test_metadata_lines_kept_in_content(self, task_email: EmailInput) -> None:
        record = EmailTaskProcessor().process(task_email)
        lines = record.content.split("\n")

        assert "Name: Renew passport" in lines
        assert "Due: 12/25/2024" in lines

    def test_settings_flow_to_extractor(self, task_email: EmailInput) -> None:
        settings = MailTaskSettings(mail_emoji="omit")
        record = EmailTaskProcessor(settings=settings).process(task_email)

        assert record.name == "Renew passport"

    def test_subject_fallback_without_name(self, reference_timestamp: str) -> None:
        record = process_email(
            "<p>Pick up the dry cleaning</p>",
            "Subject: FWD: Buy milk",
            reference_timestamp,
        )

        assert record.name == "✉️ Buy milk"
        assert record.due is None

    def test_collaborators_are_used(self, task_email: EmailInput) -> None:
        sanitizer = MagicMock()
        sanitizer.sanitize.return_value = "Priority: low"
        processor = EmailTaskProcessor(sanitizer=sanitizer)

        record = processor.process(task_email)

        sanitizer.sanitize.assert_called_once_with(task_email.html_body)
        assert record.priority == Priority.LOW


class TestInputValidation:
    """Missing required inputs fail fast with InputError."""

    def test_missing_html_body(self, reference_timestamp: str) -> None:
        email = EmailInput(html_body=None, subject_line="Hi", reference_timestamp=reference_timestamp)  # type: ignore[arg-type]
        with pytest.raises(InputError, match="HTML body"):
            EmailTaskProcessor().process(email)

    def test_missing_subject(self, reference_timestamp: str) -> None:
        email = EmailInput(html_body="<p>x</p>", subject_line=None, reference_timestamp=reference_timestamp)  # type: ignore[arg-type]
        with pytest.raises(InputError, match="subject"):
            EmailTaskProcessor().process(email)

    def test_non_string_timestamp(self) -> None:
        email = EmailInput(html_body="<p>x</p>", subject_line="Hi", reference_timestamp=None)  # type: ignore[arg-type]
        with pytest.raises(MailTaskError):
            EmailTaskProcessor().process(email)

    def test_timestamp_without_offset_is_not_fatal(self) -> None:
        record = process_email("<p>Due: tomorrow</p>", "Hi", "2024-03-01T10:00:00")

        assert record.due is None
