"""Open Graph / Twitter Card metadata extraction.

Runs against the untouched document: pruning drops elements (and text)
that the fallbacks below depend on.
"""

import logging
from typing import Dict, List

from bs4 import BeautifulSoup

from pagezen.models.article import SocialMetadata
from pagezen.services.urls import resolve_url

logger = logging.getLogger(__name__)

# ``<meta property="...">`` keys → SocialMetadata field
_PROPERTY_FIELDS = {
    "og:title": "title",
    "og:description": "description",
    "og:image": "image",
    "og:url": "url",
    "og:type": "type",
    "og:site_name": "site_name",
    "og:locale": "locale",
    "article:author": "author",
    "article:published_time": "published_at",
    "article:modified_time": "modified_at",
    "article:section": "section",
}
_PROPERTY_PREFIXES = ("og:", "article:")
_TAG_PROPERTY = "article:tag"

# ``<meta name="twitter:...">`` keys → SocialMetadata field
_TWITTER_FIELDS = {
    "twitter:card": "twitter_card",
    "twitter:site": "twitter_site",
    "twitter:creator": "twitter_creator",
    "twitter:title": "twitter_title",
    "twitter:description": "twitter_description",
    "twitter:image": "twitter_image",
}


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    meta = soup.find("meta", attrs={"name": name})
    if meta and meta.get("content"):
        return str(meta["content"]).strip()
    return ""


def _extract_property_tags(soup: BeautifulSoup, fields: Dict[str, str], tags: List[str]) -> None:
    for meta in soup.find_all("meta", attrs={"property": True}):
        prop = str(meta["property"]).strip()
        if not prop.startswith(_PROPERTY_PREFIXES):
            continue
        content = meta.get("content")
        if not content:
            continue
        if prop == _TAG_PROPERTY:
            tags.append(str(content))
        elif prop in _PROPERTY_FIELDS:
            fields[_PROPERTY_FIELDS[prop]] = str(content)


def _extract_twitter_tags(soup: BeautifulSoup, fields: Dict[str, str]) -> None:
    for meta in soup.find_all("meta", attrs={"name": True}):
        name = str(meta["name"]).strip()
        if name not in _TWITTER_FIELDS:
            continue
        content = meta.get("content")
        if content:
            fields[_TWITTER_FIELDS[name]] = str(content)


def _apply_fallbacks(soup: BeautifulSoup, fields: Dict[str, str]) -> None:
    if not fields.get("title"):
        title = fields.get("twitter_title")
        if not title:
            title_tag = soup.find("title")
            title = title_tag.get_text().strip() if title_tag else ""
        if title:
            fields["title"] = title

    if not fields.get("description"):
        description = fields.get("twitter_description") or _meta_content(soup, "description")
        if description:
            fields["description"] = description

    if not fields.get("image") and fields.get("twitter_image"):
        fields["image"] = fields["twitter_image"]

    if not fields.get("author"):
        author = _meta_content(soup, "author")
        if author:
            fields["author"] = author


def _canonical_link(soup: BeautifulSoup) -> str:
    link = soup.find("link", rel="canonical")
    if link and link.get("href"):
        return str(link["href"]).strip()
    return ""


def extract_metadata(soup: BeautifulSoup, page_url: str, base_url: str) -> SocialMetadata:
    """Build a :class:`SocialMetadata` record from the meta tags of *soup*.

    Open Graph (``og:*`` / ``article:*``) values come first, then Twitter Card
    values, then ``<title>`` and the plain ``description``/``author`` meta
    tags.  The canonical URL falls back to ``<link rel="canonical">`` and
    finally to *page_url*.  Image and canonical URLs are resolved against
    *base_url*.
    """
    fields: Dict[str, str] = {}
    tags: List[str] = []

    _extract_property_tags(soup, fields, tags)
    _extract_twitter_tags(soup, fields)
    _apply_fallbacks(soup, fields)

    fields["url"] = resolve_url(fields.get("url") or _canonical_link(soup) or page_url, base_url)
    for key in ("image", "twitter_image"):
        if fields.get(key):
            fields[key] = resolve_url(fields[key], base_url)

    metadata = SocialMetadata(**fields, tags=tuple(tags))

    logger.info(
        "Extracted Open Graph data: title=%r description_length=%d image=%s type=%s site_name=%s",
        metadata.title,
        len(metadata.description or ""),
        metadata.image,
        metadata.type,
        metadata.site_name,
    )
    return metadata
