from typing import Optional

from pydantic import BaseModel

from pagezen.models.article import SocialMetadata


class ArticleResponse(BaseModel):
    """Wire envelope for ``/extract``; ``None`` fields are left out of the JSON."""

    url: str = ""
    title: str = ""
    content: str = ""
    markdown: Optional[str] = None
    author: Optional[str] = None
    excerpt: Optional[str] = None
    length: int = 0
    published_at: Optional[str] = None
    open_graph: Optional[SocialMetadata] = None
    success: bool
    message: Optional[str] = None


class OpenGraphResponse(BaseModel):
    """Wire envelope for ``/opengraph``."""

    url: str = ""
    open_graph: Optional[SocialMetadata] = None
    success: bool
    message: Optional[str] = None
