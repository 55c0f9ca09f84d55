"""Shared fixtures for Mail Task Extractor tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mail_task_extractor.config.settings import MailTaskSettings
from mail_task_extractor.core.models import EmailInput

FIXTURES_DIR = Path(__file__).parent / "fixtures"

REFERENCE_TIMESTAMP = "2024-03-01T10:00:00-05:00"


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep MAIL_TASK_* variables and any local .env file out of tests."""
    for name in ("FALLBACK_TITLE", "MAIL_EMOJI", "MAIL_EMOJI_GLYPH", "DATE_FORMAT", "LOG_LEVEL"):
        monkeypatch.delenv(f"MAIL_TASK_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def task_email_html() -> str:
    """HTML email carrying every metadata field."""
    return (FIXTURES_DIR / "task_email.html").read_text(encoding="utf-8")


@pytest.fixture
def newsletter_html() -> str:
    """Marketing email full of tracking images."""
    return (FIXTURES_DIR / "newsletter.html").read_text(encoding="utf-8")


@pytest.fixture
def reference_timestamp() -> str:
    """Friday 2024-03-01, 10:00 in UTC-05:00."""
    return REFERENCE_TIMESTAMP


@pytest.fixture
def default_settings() -> MailTaskSettings:
    """Settings with every option at its default."""
    return MailTaskSettings()


@pytest.fixture
def task_email(task_email_html: str, reference_timestamp: str) -> EmailInput:
    """A complete email input built from the task fixture."""
    return EmailInput(
        html_body=task_email_html,
        subject_line="Subject: FWD: Passport renewal",
        reference_timestamp=reference_timestamp,
    )
