"""Due-date resolution against a reference timestamp in the email's timezone."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime

import dateparser

from mail_task_extractor.core.fields import is_blank
from mail_task_extractor.core.models import DateFormat

logger = logging.getLogger(__name__)

_OFFSET_SUFFIX_RE = re.compile(r"([+-]\d{2}):(\d{2})$")
_NUMERIC_DATE_RE = re.compile(r"(\d{1,2})/(\d{1,2})(?:/(\d{2}|\d{4}))?")
_WEEKDAY_QUALIFIER_RE = re.compile(
    r"^(?:next|this)\s+(?=(?:mon|tues?|wed(?:nes)?|thu(?:rs?)?|fri|sat(?:ur)?|sun)(?:day)?\b)",
    re.IGNORECASE,
)


def parse_reference_timestamp(timestamp: str) -> datetime | None:
    """Parse an ISO-8601 timestamp that ends in an explicit ``±HH:MM`` offset.

    Returns None when the offset suffix is missing (including a bare ``Z``)
    or the timestamp is not valid ISO-8601.
    """
    if not timestamp or not _OFFSET_SUFFIX_RE.search(timestamp):
        return None
    try:
        return datetime.fromisoformat(timestamp)
    except ValueError:
        return None


class DueDateResolver:
    """Turn free-text due dates into ``YYYY-MM-DD`` strings.

    ``D/D`` and ``D/D/YY(YY)`` dates are read strictly in the configured
    order (US month-first, EU day-first). Anything else goes through
    dateparser relative to the reference timestamp, preferring future dates.
    """

    def __init__(
        self,
        date_format: DateFormat = DateFormat.US,
        log: logging.Logger | None = None,
    ) -> None:
        self._date_format = DateFormat(date_format)
        self._log = log or logger

    @property
    def date_format(self) -> DateFormat:
        return self._date_format

    def resolve(self, text: str | None, reference_timestamp: str) -> str | None:
        """Resolve *text* to an ISO date, or None if it cannot be resolved.

        Args:
            text: Raw value of the ``Due:`` line.
            reference_timestamp: Current time in the email's timezone, with offset.

        Returns:
            ``YYYY-MM-DD`` string or None.
        """
        if is_blank(text):
            return None

        self._log.debug("Due text: %r, reference: %r", text, reference_timestamp)

        reference = parse_reference_timestamp(reference_timestamp)
        if reference is None:
            self._log.debug("Reference timestamp %r has no UTC offset", reference_timestamp)
            return None

        numeric = _NUMERIC_DATE_RE.fullmatch(text)
        if numeric:
            return self._resolve_numeric(*numeric.groups(), reference=reference)

        return self._resolve_natural(text, reference)

    def _resolve_numeric(
        self, first: str, second: str, year_text: str | None, *, reference: datetime
    ) -> str | None:
        """Build a date from D/D(/Y) parts, ordered by the configured format.

        Parts that do not form a real calendar date, such as "12/25" read
        day-first, resolve to None instead of an out-of-range ISO string.
        """
        if self._date_format == DateFormat.EU:
            day, month = first, second
        else:
            month, day = first, second

        if year_text is None:
            year = reference.year
        elif len(year_text) == 2:
            year = int(f"20{year_text}")
        else:
            year = int(year_text)

        try:
            resolved = date(year, int(month), int(day)).isoformat()
        except ValueError:
            self._log.debug("Numeric date %s/%s/%s is not a calendar date", month, day, year)
            return None

        self._log.debug("Numeric date result: %s", resolved)
        return resolved

    def _resolve_natural(self, text: str, reference: datetime) -> str | None:
        # dateparser rejects "next friday" and "this friday" but resolves the
        # bare weekday to its next occurrence.
        text = _WEEKDAY_QUALIFIER_RE.sub("", text)
        try:
            parsed = dateparser.parse(
                text,
                languages=["en"],
                settings={
                    "RELATIVE_BASE": reference.replace(tzinfo=None),
                    "PREFER_DATES_FROM": "future",
                    "DATE_ORDER": "DMY" if self._date_format == DateFormat.EU else "MDY",
                },
            )
        except Exception as exc:
            self._log.debug("dateparser failed for %r: %s", text, exc)
            return None

        if parsed is None:
            self._log.debug("No date found in %r", text)
            return None

        self._log.debug("dateparser result: %s", parsed.isoformat())

        # Naive results are already wall-clock time in the reference's zone.
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(reference.tzinfo)
            self._log.debug("Timezone adjusted result: %s", parsed.isoformat())

        return parsed.date().isoformat()
