"""Minimal CLI entry point for manual runs of the Mail Task Extractor."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from mail_task_extractor.config.settings import MailTaskSettings
from mail_task_extractor.core.exceptions import MailTaskError
from mail_task_extractor.core.models import DateFormat, EmailInput, FallbackTitle, MailEmoji
from mail_task_extractor.core.sanitizer import HtmlSanitizer
from mail_task_extractor.pipeline.processor import EmailTaskProcessor


def setup_logging(level: str) -> None:
    """Configure logging with timestamp and module info."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def read_html(source: str) -> str:
    """Read HTML from a file path, or from stdin when *source* is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def current_timestamp() -> str:
    """Local time with its UTC offset, e.g. ``2024-03-01T10:00:00-05:00``."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _add_html_arg(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--html",
        required=True,
        help="Path to the email HTML body ('-' reads stdin)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mail Task Extractor - Convert task emails to markdown and task fields"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Print the task record as JSON")
    _add_html_arg(extract_parser)
    extract_parser.add_argument("--subject", "-s", required=True, help="Email subject line")
    extract_parser.add_argument(
        "--timestamp",
        "-t",
        default=None,
        help="Reference time, ISO-8601 with UTC offset (default: now, local time)",
    )
    extract_parser.add_argument(
        "--fallback-title",
        choices=[choice.value for choice in FallbackTitle],
        default=None,
        dest="fallback_title",
        help="Title source when the email has no Name: line",
    )
    extract_parser.add_argument(
        "--mail-emoji",
        choices=[choice.value for choice in MailEmoji],
        default=None,
        dest="mail_emoji",
        help="Mail emoji placement in the title",
    )
    extract_parser.add_argument(
        "--date-format",
        choices=[choice.value for choice in DateFormat],
        default=None,
        dest="date_format",
        help="Order of numeric dates: us (MM/DD) or eu (DD/MM)",
    )

    # sanitize command
    sanitize_parser = subparsers.add_parser("sanitize", help="Print the sanitized markdown")
    _add_html_arg(sanitize_parser)

    return parser


def build_settings(args: argparse.Namespace) -> MailTaskSettings:
    """Settings from the environment, overridden by any flags given."""
    overrides = {
        name: getattr(args, name)
        for name in ("fallback_title", "mail_emoji", "date_format")
        if getattr(args, name, None) is not None
    }
    return MailTaskSettings(**overrides)


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = build_settings(args)
    setup_logging(settings.log_level)

    try:
        html = read_html(args.html)

        if args.command == "sanitize":
            print(HtmlSanitizer().sanitize(html))

        elif args.command == "extract":
            processor = EmailTaskProcessor(settings=settings)
            record = processor.process(
                EmailInput(
                    html_body=html,
                    subject_line=args.subject,
                    reference_timestamp=args.timestamp or current_timestamp(),
                )
            )
            print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except (MailTaskError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
