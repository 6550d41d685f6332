from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SocialMetadata(BaseModel):
    """Open Graph / Twitter Card metadata for one page.

    Absent values are ``None``; every URL-valued field that is set is absolute.
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    site_name: Optional[str] = None
    locale: Optional[str] = None
    # Twitter Card
    twitter_card: Optional[str] = None
    twitter_site: Optional[str] = None
    twitter_creator: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    # Article metadata
    author: Optional[str] = None
    published_at: Optional[str] = None
    modified_at: Optional[str] = None
    section: Optional[str] = None
    tags: Tuple[str, ...] = ()


class CleanedArticle(BaseModel):
    """Result of a full article extraction."""

    title: str
    content: str  # normalised plain text
    markdown: Optional[str] = None
    url: str
    author: Optional[str] = None
    excerpt: str
    length: int  # character count of ``content``
    published_at: Optional[str] = None
    open_graph: Optional[SocialMetadata] = None
