"""Pipeline orchestrator: validate → sanitize → extract."""

from __future__ import annotations

import logging

from mail_task_extractor.config.settings import MailTaskSettings
from mail_task_extractor.core.exceptions import InputError
from mail_task_extractor.core.extractor import MetadataExtractor
from mail_task_extractor.core.models import EmailInput, ResultRecord
from mail_task_extractor.core.sanitizer import HtmlSanitizer

logger = logging.getLogger(__name__)


class EmailTaskProcessor:
    """Turns one email into one structured task record.

    Stage 1 - Sanitize: strip tracking/scripting markup, convert HTML to markdown
    Stage 2 - Extract:  scan markdown for metadata lines, derive the title
    """

    def __init__(
        self,
        settings: MailTaskSettings | None = None,
        sanitizer: HtmlSanitizer | None = None,
        extractor: MetadataExtractor | None = None,
    ) -> None:
        self._settings = settings or MailTaskSettings()
        self._sanitizer = sanitizer or HtmlSanitizer()
        self._extractor = extractor or MetadataExtractor(self._settings)

    @property
    def settings(self) -> MailTaskSettings:
        return self._settings

    def process(self, email: EmailInput) -> ResultRecord:
        """Run both stages for a single email.

        Args:
            email: HTML body, subject line and reference timestamp.

        Returns:
            ResultRecord with markdown content and every metadata field.

        Raises:
            InputError: If the HTML body or subject line is missing.
        """
        self._validate(email)

        markdown = self._sanitizer.sanitize(email.html_body)
        record = self._extractor.extract(
            markdown,
            email.subject_line,
            email.reference_timestamp,
        )
        logger.info("Extracted task %r (due=%s)", record.name, record.due)
        return record

    @staticmethod
    def _validate(email: EmailInput) -> None:
        if not isinstance(email.html_body, str):
            raise InputError("Email HTML body is missing")
        if not isinstance(email.subject_line, str):
            raise InputError("Email subject line is missing")
        if not isinstance(email.reference_timestamp, str):
            raise InputError("Reference timestamp must be a string")


def process_email(
    html_body: str,
    subject_line: str,
    reference_timestamp: str,
    settings: MailTaskSettings | None = None,
) -> ResultRecord:
    """Convenience wrapper: build an EmailInput and process it once."""
    processor = EmailTaskProcessor(settings=settings)
    return processor.process(
        EmailInput(
            html_body=html_body,
            subject_line=subject_line,
            reference_timestamp=reference_timestamp,
        )
    )
