"""HTML sanitizer: strip tracking markup from email HTML and convert it to markdown."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from urllib.parse import urlparse

import trafilatura
from bs4 import BeautifulSoup, NavigableString, Tag
from markdownify import MarkdownConverter

from mail_task_extractor.core.exceptions import ConversionError

logger = logging.getLogger(__name__)

# Marketing / ESP hosts whose images are open trackers.
TRACKING_DOMAINS: tuple[str, ...] = (
    "open.convertkit",
    "mailchimp",
    "sendgrid",
    "mailgun",
    "customerio",
    "klaviyo",
    "hubspot",
    "marketo",
    "salesforce",
    "mailerlite",
    "constantcontact",
    "aweber",
    "getresponse",
    "activecampaign",
    "drip",
    "sendinblue",
    "autopilot",
)

# URL fragments used by open trackers and beacons.
TRACKING_PATTERNS: tuple[str, ...] = (
    "/imp?",
    "/pixel",
    "/track",
    "/open",
    "/wf/open",
    "beacon",
    "analytics",
    "tracking",
    "counter",
    "monitor",
    "1x1.gif",
    "1x1.png",
    "spacer.gif",
    "blank.gif",
    "elink.mail",
    "cdn-cgi/image",
)

# Image CDNs that serve files without an extension, mapped to the extension to append.
CDN_EXTENSIONS: MappingProxyType[str, str] = MappingProxyType(
    {
        "filekitcdn.com": ".jpg",
        "imagecdn.convertkit.com": ".jpg",
        "embed.filekitcdn.com": ".jpg",
        "cdn.substack.com": ".jpg",
        "mailchimp.com": ".jpg",
        "sendgrid.net": ".jpg",
        "campaign-archive.com": ".jpg",
        "cloudfront.net": ".jpg",
        "imgix.net": ".jpg",
        "amazonaws.com": ".jpg",
        "customeriomail.com": ".jpg",
        "mailgun.net": ".jpg",
        "sendibm1.com": ".jpg",
        "klaviyo-images.com": ".jpg",
        "constantcontact.com": ".jpg",
        "getresponse.com": ".jpg",
        "activehosted.com": ".jpg",
        "omnisrc.com": ".jpg",
        "hubspotusercontent.net": ".jpg",
        "cmail.com": ".jpg",
        "awesomescreenshot.com": ".jpg",
        "cloudinary.com": ".jpg",
    }
)

_TRACKING_LABEL_RE = re.compile(r"spacer|pixel|blank|tracking|open", re.IGNORECASE)
_METADATA_PARAGRAPH_RE = re.compile(r"^(Name|Due|Email Link):")
_IMAGE_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE)
_INVISIBLE_CHARS_RE = re.compile("[\u200b\u2007\u034f\u00ad]+")
_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _attr(el: Tag, name: str) -> str:
    """Return an attribute as a string, empty when absent."""
    value = el.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def matches_tracking_pattern(src: str) -> bool:
    """True if *src* contains one of the known tracking URL fragments."""
    lowered = src.lower()
    return any(pattern in lowered for pattern in TRACKING_PATTERNS)


def matches_tracking_domain(src: str) -> bool:
    """True if *src* points at one of the known marketing/ESP tracking hosts."""
    lowered = src.lower()
    return any(domain in lowered for domain in TRACKING_DOMAINS)


def repair_image_url(src: str) -> str:
    """Fix mis-encoded quality parameters and add extensions for extensionless CDNs."""
    src = src.replace("quality€", "quality=90")
    host = urlparse(src).netloc.lower()
    for domain, extension in CDN_EXTENSIONS.items():
        if domain in host and not _IMAGE_EXTENSION_RE.search(src):
            return f"{src}{extension}"
    return src


class EmailMarkdownConverter(MarkdownConverter):
    """markdownify converter that drops tracking images and repairs CDN image URLs."""

    def convert_img(self, el: Tag, text: str, parent_tags: set[str]) -> str:
        alt = _attr(el, "alt")
        src = _attr(el, "src")

        if matches_tracking_pattern(src):
            return ""

        src = repair_image_url(src)
        if src and "undefined" not in src:
            return f"![{alt}]({src})"
        return ""


class HtmlSanitizer:
    """Remove tracking and scripting markup from email HTML and render it as markdown."""

    def sanitize(self, html: str) -> str:
        """Convert raw email HTML to cleaned markdown.

        Strategy:
        1. Drop style/script/head elements and tracking images from the DOM.
        2. Keep ``Name:``/``Due:``/``Email Link:`` paragraphs on their own lines.
        3. Convert via markdownify; fall back to trafilatura, then plain text.
        4. Remove invisible formatting characters and collapse blank lines.

        Args:
            html: Raw HTML body of the email.

        Returns:
            Markdown string.

        Raises:
            ConversionError: If every conversion path fails.
        """
        soup = BeautifulSoup(html, "lxml")
        self._remove_unwanted_elements(soup)
        removed = self._remove_tracking_images(soup)
        if removed:
            logger.debug("Removed %d tracking images", removed)
        self._separate_metadata_paragraphs(soup)

        markdown = self._to_markdown(str(soup), soup)
        return self._clean_text(markdown)

    @staticmethod
    def _remove_unwanted_elements(soup: BeautifulSoup) -> None:
        for el in soup.find_all(["style", "script", "head"]):
            el.decompose()
        for img in soup.select('img[src*="pixel"], img[src*="imp"]'):
            img.decompose()

    def _remove_tracking_images(self, soup: BeautifulSoup) -> int:
        removed = 0
        for img in soup.find_all("img"):
            if self.is_tracking_image(img):
                img.decompose()
                removed += 1
        return removed

    @staticmethod
    def is_tracking_image(img: Tag) -> bool:
        """Decide whether an ``<img>`` is a tracking pixel rather than content.

        An image is tracking if any of these hold:
        - it has no alt text and sits inside an element containing an
          "Unsubscribe" link
        - its source is on a known tracking domain or matches a tracking pattern
        - it is declared 1x1 or 0x0
        - its alt or title is a throwaway word like "spacer" or "pixel"
        """
        src = _attr(img, "src")
        alt = _attr(img, "alt")
        title = _attr(img, "title")
        width = _attr(img, "width")
        height = _attr(img, "height")

        if not alt and _near_unsubscribe_link(img):
            return True
        if matches_tracking_domain(src) or matches_tracking_pattern(src):
            return True
        if (width, height) in (("1", "1"), ("0", "0")):
            return True
        return bool(_TRACKING_LABEL_RE.fullmatch(alt) or _TRACKING_LABEL_RE.fullmatch(title))

    @staticmethod
    def _separate_metadata_paragraphs(soup: BeautifulSoup) -> None:
        for p in soup.select('p[dir="auto"]'):
            if _METADATA_PARAGRAPH_RE.match(p.get_text().strip()):
                p.insert_after(NavigableString("\n\n"))

    @staticmethod
    def _to_markdown(cleaned_html: str, soup: BeautifulSoup) -> str:
        try:
            return EmailMarkdownConverter(
                heading_style="ATX",
                bullets="*",
                autolinks=False,
            ).convert(cleaned_html)
        except Exception as e:
            logger.warning("markdownify conversion failed: %s", e)

        try:
            result = trafilatura.extract(
                cleaned_html,
                output_format="markdown",
                favor_recall=True,
                include_links=True,
                include_tables=True,
            )
        except Exception as e:
            logger.warning("Trafilatura extraction failed: %s", e)
            result = None

        if result is not None:
            return result

        try:
            return soup.get_text(separator="\n")
        except Exception as e:
            raise ConversionError(f"Could not convert email HTML to markdown: {e}") from e

    @staticmethod
    def _clean_text(markdown: str) -> str:
        markdown = _INVISIBLE_CHARS_RE.sub("", markdown)
        markdown = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", markdown)
        return markdown.strip()


def _near_unsubscribe_link(img: Tag) -> bool:
    """True if an ancestor of *img* contains a link whose text mentions "Unsubscribe"."""
    outermost = None
    for ancestor in img.parents:
        outermost = ancestor
    if outermost is None:
        return False
    # The outermost ancestor contains every other one.
    return any("Unsubscribe" in link.get_text() for link in outermost.find_all("a"))
