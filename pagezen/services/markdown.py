import logging

from markdownify import markdownify

logger = logging.getLogger(__name__)


def render_markdown(html: str) -> str:
    """Convert *html* to Markdown, falling back to *html* itself.

    Never raises: a conversion error, or an empty rendering of non-empty
    input, is logged and the original HTML is returned so callers always
    have renderable content.
    """
    logger.info("Converting HTML content to markdown")
    try:
        markdown = markdownify(html, heading_style="ATX").strip()
    except Exception as exc:
        logger.warning("Failed to convert to markdown, using HTML content: %s", exc)
        return html

    if not markdown and html.strip():
        logger.warning("Markdown conversion produced no output, using HTML content")
        return html
    return markdown
