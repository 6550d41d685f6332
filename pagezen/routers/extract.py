"""Article extraction endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from pagezen.config import settings
from pagezen.models.article import CleanedArticle
from pagezen.models.request import ArticleRequest
from pagezen.models.response import ArticleResponse
from pagezen.services.errors import ExtractionError
from pagezen.services.extractor import extract_article

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


@router.post(
    "/extract",
    response_model=ArticleResponse,
    response_model_exclude_none=True,
    summary="Extract the main article from a web page",
)
@limiter.limit(settings.rate_limit)
async def extract(request: Request, body: ArticleRequest):
    """Fetch *url*, strip boilerplate and return the article text and metadata.

    Set ``include_markdown`` to also receive the article body as Markdown.
    """
    url = str(body.url)
    logger.info("Processing article extraction request: url=%s include_markdown=%s", url, body.include_markdown)
    return await _run_extraction(url, body.include_markdown)


@router.get(
    "/extract",
    response_model=ArticleResponse,
    response_model_exclude_none=True,
    summary="Extract the main article from a web page (query-string variant)",
)
@limiter.limit(settings.rate_limit)
async def extract_simple(
    request: Request,
    url: Optional[str] = Query(default=None, description="Page to extract."),
    markdown: str = Query(default="false", description="'true' to include Markdown."),
):
    if not url:
        logger.warning("URL parameter missing")
        return _error(400, "URL parameter is required")

    include_markdown = markdown.strip().lower() == "true"
    logger.info("Processing simple article extraction: url=%s include_markdown=%s", url, include_markdown)
    return await _run_extraction(url, include_markdown)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

async def _run_extraction(url: str, include_markdown: bool):
    try:
        article = await extract_article(url)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        return _error(400, str(exc), url)
    except ExtractionError as exc:
        logger.error("Failed to extract article %s: %s", url, exc)
        return _error(500, str(exc), url)

    if not article.title and not article.content:
        logger.warning("Failed to extract article content: %s", url)
        return _error(500, "Failed to extract article content", url)

    logger.info(
        "Successfully extracted article: url=%s title=%r content_length=%d include_markdown=%s",
        url,
        article.title,
        article.length,
        include_markdown,
    )
    return _to_response(article, include_markdown)


def _to_response(article: CleanedArticle, include_markdown: bool) -> ArticleResponse:
    return ArticleResponse(
        url=article.url,
        title=article.title,
        content=article.content,
        markdown=article.markdown if include_markdown else None,
        author=article.author,
        excerpt=article.excerpt or None,
        length=article.length,
        published_at=article.published_at,
        open_graph=article.open_graph,
        success=True,
    )


def _error(status_code: int, message: str, url: str = "") -> JSONResponse:
    envelope = ArticleResponse(url=url, success=False, message=message)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )
