"""Article extraction pipeline.

One mutable BeautifulSoup tree is passed through every stage in order:

    fetch → parse → metadata → prune → images → readability → text → markdown

Metadata is read before pruning because the removal rules take out page
chrome the fallbacks rely on.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Pattern, Tuple

import httpx
from bs4 import BeautifulSoup, ParserRejectedMarkup

from pagezen.config import settings
from pagezen.models.article import CleanedArticle, SocialMetadata
from pagezen.services.cleaner import BOILERPLATE_PATTERNS, EXCERPT_LENGTH, clean_text, generate_excerpt
from pagezen.services.errors import FetchError, ParseError
from pagezen.services.fetcher import fetch_url
from pagezen.services.images import rewrite_images
from pagezen.services.markdown import render_markdown
from pagezen.services.metadata import extract_metadata
from pagezen.services.reader import summarize
from pagezen.services.sanitizer import REMOVAL_RULES, prune

logger = logging.getLogger(__name__)


async def fetch_document(url: str) -> Tuple[BeautifulSoup, str]:
    """Fetch and parse *url*, returning the document and its post-redirect URL.

    Raises:
        ValueError: if *url* fails validation.
        FetchError: on transport errors, timeouts, oversize bodies or redirect loops.
        ParseError: if the body cannot be parsed.
    """
    try:
        html, final_url = await fetch_url(url)
    except httpx.TimeoutException as exc:
        logger.error("Timeout fetching URL %s: %s", url, exc)
        raise FetchError("The target URL timed out.") from exc
    except (httpx.HTTPError, RuntimeError) as exc:
        logger.error("Failed to fetch URL %s: %s", url, exc)
        raise FetchError(f"Failed to fetch URL: {exc}") from exc

    try:
        soup = BeautifulSoup(html, "lxml")
    except ParserRejectedMarkup as exc:
        logger.error("Failed to parse HTML document %s: %s", url, exc)
        raise ParseError(f"Failed to parse HTML document: {exc}") from exc

    return soup, final_url


def save_debug_html(soup: BeautifulSoup, path: str) -> None:
    """Write the processed document to *path*; failures are logged, never raised."""
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(str(soup), encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to save debug HTML to %s: %s", target, exc)
        return
    logger.debug("Saved cleaned HTML to file: %s", target)


async def extract_article(
    url: str,
    *,
    removal_rules: Iterable[str] = REMOVAL_RULES,
    boilerplate_patterns: Iterable[Pattern[str]] = BOILERPLATE_PATTERNS,
) -> CleanedArticle:
    """Fetch *url* and return its cleaned article content.

    Raises:
        ValueError: if *url* fails validation.
        ExtractionError: (FetchError, ParseError, ReadabilityError) if no
            article could be produced.
    """
    soup, base_url = await fetch_document(url)

    open_graph = extract_metadata(soup, url, base_url)

    prune(soup, removal_rules)
    rewrite_images(soup, base_url)

    summary = summarize(soup)

    content = clean_text(summary.text_content, boilerplate_patterns)
    markdown = render_markdown(summary.content_html)
    excerpt = generate_excerpt(content, EXCERPT_LENGTH)

    published_at: Optional[str] = None
    if summary.published_time is not None:
        published_at = summary.published_time.isoformat()

    article = CleanedArticle(
        title=summary.title.strip(),
        content=content,
        markdown=markdown,
        url=url,
        author=summary.byline.strip() or None,
        excerpt=excerpt,
        length=len(content),
        published_at=published_at,
        open_graph=open_graph,
    )

    logger.info(
        "Successfully processed article: url=%s title_length=%d content_length=%d markdown_length=%d",
        url,
        len(article.title),
        article.length,
        len(markdown),
    )

    if settings.save_debug_html:
        save_debug_html(soup, settings.debug_html_path)

    return article


async def extract_opengraph(url: str) -> SocialMetadata:
    """Fetch *url* and return only its social metadata (no pruning or readability)."""
    logger.info("Starting to fetch Open Graph data: %s", url)
    soup, base_url = await fetch_document(url)
    metadata = extract_metadata(soup, url, base_url)
    logger.info("Successfully extracted Open Graph data: url=%s title=%r", url, metadata.title)
    return metadata
