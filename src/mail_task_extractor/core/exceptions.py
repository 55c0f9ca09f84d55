"""Custom exceptions for the Mail Task Extractor."""


class MailTaskError(Exception):
    """Base exception for all Mail Task Extractor errors."""


class InputError(MailTaskError):
    """A required email input (HTML body, subject line) is missing or malformed."""


class ConversionError(MailTaskError):
    """Failed to convert email HTML to markdown by every available path."""
