"""Mail Task Extractor - Turn task emails into clean markdown and structured task fields."""

from mail_task_extractor.config.settings import MailTaskSettings
from mail_task_extractor.core.models import (
    DateFormat,
    EmailInput,
    FallbackTitle,
    MailEmoji,
    Priority,
    ResultRecord,
    SmartList,
    Status,
)
from mail_task_extractor.pipeline.processor import EmailTaskProcessor, process_email

__all__ = [
    "DateFormat",
    "EmailInput",
    "EmailTaskProcessor",
    "FallbackTitle",
    "MailEmoji",
    "MailTaskSettings",
    "Priority",
    "ResultRecord",
    "SmartList",
    "Status",
    "process_email",
]
