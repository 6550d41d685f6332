"""Adapter around readability-lxml.

readability-lxml only scores the body and picks a title; the byline and
publish time are read from the document's metadata the same way browser
reader modes do.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from bs4 import BeautifulSoup
from dateutil import parser as dateparser
from readability import Document
from readability.readability import Unparseable

from pagezen.services.errors import ReadabilityError

logger = logging.getLogger(__name__)

_MAX_BYLINE_LENGTH = 100

# (attribute, value) pairs of <meta> tags that may carry the author name
_BYLINE_META = (
    ("name", "author"),
    ("property", "article:author"),
    ("name", "dc.creator"),
    ("name", "parsely-author"),
)
_BYLINE_SELECTOR = "[rel~='author'], [itemprop~='author'], .byline"

# <meta> tags that may carry the publish timestamp, in order of preference
_PUBLISHED_META = (
    ("property", "article:published_time"),
    ("name", "dcterms.created"),
    ("name", "dcterms.issued"),
    ("name", "dcterms.available"),
)


@dataclass
class ArticleSummary:
    title: str
    byline: str
    content_html: str
    text_content: str
    published_time: Optional[datetime] = None


def _meta_value(soup: BeautifulSoup, attr: str, value: str) -> str:
    meta = soup.find("meta", attrs={attr: value})
    if meta and meta.get("content"):
        return str(meta["content"]).strip()
    return ""


def find_byline(soup: BeautifulSoup) -> str:
    for attr, value in _BYLINE_META:
        byline = _meta_value(soup, attr, value)
        # article:author is frequently a profile URL rather than a name
        if byline and not byline.startswith(("http://", "https://")):
            return byline

    node = soup.select_one(_BYLINE_SELECTOR)
    if node is not None:
        byline = " ".join(node.get_text(" ").split())
        if byline and len(byline) <= _MAX_BYLINE_LENGTH:
            return byline
    return ""


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return dateparser.isoparse(value)
    except ValueError:
        pass
    try:
        return dateparser.parse(value)
    except (ValueError, OverflowError):
        logger.debug("Unparseable publish time: %r", value)
        return None


def find_published_time(soup: BeautifulSoup) -> Optional[datetime]:
    candidates = [_meta_value(soup, attr, value) for attr, value in _PUBLISHED_META]

    node = soup.select_one("[itemprop='datePublished']")
    if node is not None:
        candidates.append(str(node.get("content") or node.get("datetime") or "").strip())

    node = soup.select_one("time[datetime]")
    if node is not None:
        candidates.append(str(node["datetime"]).strip())

    for candidate in candidates:
        if candidate:
            parsed = _parse_timestamp(candidate)
            if parsed is not None:
                return parsed
    return None


def summarize(soup: BeautifulSoup) -> ArticleSummary:
    """Locate the main article in *soup* and return its title, byline, body and date.

    Raises:
        ReadabilityError: if the document cannot be scored or yields no text.
    """
    logger.info("Converting document to readability format")
    doc = Document(str(soup))
    try:
        content_html = doc.summary(html_partial=True)
    except Unparseable as exc:
        logger.error("Failed to convert document to readability format: %s", exc)
        raise ReadabilityError(f"Could not extract article content: {exc}") from exc

    text_content = BeautifulSoup(content_html, "lxml").get_text()
    if not text_content.strip():
        logger.error("Readability found no article content")
        raise ReadabilityError("Could not extract article content: no readable text found")

    return ArticleSummary(
        title=doc.short_title(),
        byline=find_byline(soup),
        content_html=content_html,
        text_content=text_content,
        published_time=find_published_time(soup),
    )
