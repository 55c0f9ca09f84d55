"""Configuration via pydantic-settings with .env support."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from mail_task_extractor.core.models import DateFormat, FallbackTitle, MailEmoji


class MailTaskSettings(BaseSettings):
    """Extraction settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="MAIL_TASK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Title
    fallback_title: FallbackTitle = FallbackTitle.SUBJECT
    mail_emoji: MailEmoji = MailEmoji.BEFORE
    mail_emoji_glyph: str = "✉️"

    # Dates
    date_format: DateFormat = DateFormat.US

    # Logging
    log_level: str = "INFO"

    def decorate_title(self, title: str) -> str:
        """Place the mail emoji before or after *title*, or leave it bare."""
        if self.mail_emoji == MailEmoji.BEFORE:
            return f"{self.mail_emoji_glyph} {title}"
        if self.mail_emoji == MailEmoji.AFTER:
            return f"{title} {self.mail_emoji_glyph}"
        return title
