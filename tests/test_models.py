"""Unit tests for mail_task_extractor.core.models dataclasses."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from mail_task_extractor.core.models import (
    EmailInput,
    Priority,
    ResultRecord,
    SmartList,
    Status,
)

# ---------------------------------------------------------------------------
# EmailInput
# ---------------------------------------------------------------------------


class TestEmailInput:
    def test_stores_fields(self) -> None:
        email = EmailInput(
            html_body="<p>Hi</p>",
            subject_line="Hello",
            reference_timestamp="2024-03-01T10:00:00-05:00",
        )
        assert email.html_body == "<p>Hi</p>"
        assert email.subject_line == "Hello"
        assert email.reference_timestamp == "2024-03-01T10:00:00-05:00"

    def test_frozen(self) -> None:
        email = EmailInput(html_body="", subject_line="", reference_timestamp="")
        with pytest.raises(FrozenInstanceError):
            email.subject_line = "Changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ResultRecord
# ---------------------------------------------------------------------------


class TestResultRecord:
    """ResultRecord defaults every metadata field to None."""

    def test_defaults(self) -> None:
        record = ResultRecord(content="body", name="Task")
        assert record.due is None
        assert record.email_link is None
        assert record.label is None
        assert record.priority is None
        assert record.smart_list is None
        assert record.status is None
        assert record.tag is None

    def test_frozen(self) -> None:
        record = ResultRecord(content="body", name="Task")
        with pytest.raises(FrozenInstanceError):
            record.name = "Other"  # type: ignore[misc]

    def test_to_dict_has_every_key(self) -> None:
        assert list(ResultRecord(content="", name="Task").to_dict()) == [
            "content",
            "name",
            "due",
            "email link",
            "label",
            "priority",
            "smart list",
            "status",
            "tag",
        ]

    def test_to_dict_plain_values(self) -> None:
        record = ResultRecord(
            content="body",
            name="Task",
            due="2024-12-25",
            email_link="https://mail.example.com/m/1",
            label=("Home", "Bills"),
            priority=Priority.HIGH,
            smart_list=SmartList.SOMEDAY,
            status=Status.TO_DO,
            tag="errands",
        )
        data = record.to_dict()

        assert data["label"] == ["Home", "Bills"]
        assert data["priority"] == "High"
        assert type(data["priority"]) is str
        assert data["smart list"] == "Someday"
        assert data["status"] == "To Do"
        assert data["email link"] == "https://mail.example.com/m/1"

    def test_to_dict_keeps_empty_label(self) -> None:
        assert ResultRecord(content="", name="Task", label=()).to_dict()["label"] == []
