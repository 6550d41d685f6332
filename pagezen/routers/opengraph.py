"""Metadata-only endpoints for link previews."""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from pagezen.config import settings
from pagezen.models.request import OpenGraphRequest
from pagezen.models.response import OpenGraphResponse
from pagezen.routers.extract import limiter
from pagezen.services.errors import ExtractionError
from pagezen.services.extractor import extract_opengraph

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/opengraph",
    response_model=OpenGraphResponse,
    response_model_exclude_none=True,
    summary="Extract Open Graph / Twitter Card metadata",
)
@limiter.limit(settings.rate_limit)
async def opengraph(request: Request, body: OpenGraphRequest):
    url = str(body.url)
    logger.info("Processing Open Graph extraction request: %s", url)
    return await _run_opengraph(url)


@router.get(
    "/opengraph",
    response_model=OpenGraphResponse,
    response_model_exclude_none=True,
    summary="Extract Open Graph / Twitter Card metadata (query-string variant)",
)
@limiter.limit(settings.rate_limit)
async def opengraph_simple(
    request: Request,
    url: Optional[str] = Query(default=None, description="Page to inspect."),
):
    if not url:
        logger.warning("URL parameter missing")
        return _error(400, "URL parameter is required")

    logger.info("Processing simple Open Graph extraction: %s", url)
    return await _run_opengraph(url)


async def _run_opengraph(url: str):
    try:
        metadata = await extract_opengraph(url)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        return _error(400, str(exc), url)
    except ExtractionError as exc:
        logger.error("Failed to extract Open Graph data %s: %s", url, exc)
        return _error(500, str(exc), url)

    # A page without any title is treated as a failed preview
    if not metadata.title:
        logger.warning("Failed to extract Open Graph data: %s", url)
        return _error(500, "Failed to extract Open Graph data", url)

    logger.info(
        "Successfully extracted Open Graph data: url=%s title=%r description_length=%d",
        url,
        metadata.title,
        len(metadata.description or ""),
    )
    return OpenGraphResponse(url=url, open_graph=metadata, success=True)


def _error(status_code: int, message: str, url: str = "") -> JSONResponse:
    envelope = OpenGraphResponse(url=url, success=False, message=message)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )
