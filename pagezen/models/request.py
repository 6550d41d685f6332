from pydantic import BaseModel, HttpUrl


class ArticleRequest(BaseModel):
    url: HttpUrl
    include_markdown: bool = False
    """Return the Markdown rendering alongside the plain-text content."""


class OpenGraphRequest(BaseModel):
    url: HttpUrl
