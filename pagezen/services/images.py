"""Image normalisation: collapse ``<picture>`` elements and absolutise ``<img>`` sources."""

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from pagezen.services.urls import resolve_url

logger = logging.getLogger(__name__)

# Attributes that only make sense to a browser doing responsive/lazy loading
_HINT_ATTRS = ("loading", "decoding")


def _parse_width(descriptor: str) -> int:
    """Parse a ``1200w`` width descriptor into ``1200``; raises ValueError otherwise."""
    if descriptor.endswith("w"):
        descriptor = descriptor[:-1]
    return int(descriptor)


def find_highest_quality_source(picture: Tag) -> Optional[str]:
    """Return the srcset candidate with the largest width descriptor in *picture*.

    Candidates are gathered from every ``<source srcset>`` child.  Entries that
    are not exactly ``url descriptor`` or whose descriptor is not an integer
    width are skipped.
    """
    best: Optional[str] = None
    max_width = 0

    for source in picture.find_all("source"):
        srcset = source.get("srcset")
        if not srcset:
            continue
        for candidate in str(srcset).split(","):
            parts = candidate.split()
            if len(parts) != 2:
                continue
            try:
                width = _parse_width(parts[1])
            except ValueError:
                logger.debug("Failed to parse width from srcset: %r", parts[1])
                continue
            if width > max_width:
                max_width = width
                best = parts[0]

    return best


def _strip_hints(img: Tag, *extra: str) -> None:
    for attr in _HINT_ATTRS + extra:
        if attr in img.attrs:
            del img[attr]


def collapse_pictures(soup: BeautifulSoup, base_url: str) -> int:
    """Replace each ``<picture>`` with its ``<img>``, pointed at the widest source."""
    count = 0
    for picture in soup.find_all("picture"):
        img = picture.find("img")
        if img is None:
            continue
        count += 1

        best = find_highest_quality_source(picture)
        if best:
            # Older clients choke on webp; most CDNs serve png at the same path
            best = best.replace("webp", "png", 1)
            img["src"] = resolve_url(best, base_url)
            logger.debug("Updated picture element source: %s", img["src"])

        _strip_hints(img)
        picture.replace_with(img.extract())

    if count:
        logger.debug("Processed picture elements: %d", count)
    return count


def normalize_images(soup: BeautifulSoup, base_url: str) -> int:
    """Drop loading hints from every ``<img>`` and make its ``src`` absolute."""
    count = 0
    for img in soup.find_all("img"):
        count += 1
        if not img.get("src") and img.get("data-src"):
            img["src"] = img["data-src"]
        _strip_hints(img, "srcset", "data-src")

        src = img.get("src")
        if src:
            resolved = resolve_url(str(src), base_url)
            if resolved != src:
                img["src"] = resolved
                logger.debug("Updated img src: %s -> %s", src, resolved)

    if count:
        logger.debug("Processed img elements: %d", count)
    return count


def rewrite_images(soup: BeautifulSoup, base_url: str) -> None:
    """Rewrite images in *soup* in place so every remaining image has an absolute src."""
    collapse_pictures(soup, base_url)
    normalize_images(soup, base_url)
