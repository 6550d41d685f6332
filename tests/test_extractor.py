"""Tests for the extraction pipeline with the network fetch mocked out."""

import asyncio
import logging
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from pagezen.config import settings
from pagezen.services.errors import FetchError, ReadabilityError
from pagezen.services.extractor import extract_article, extract_opengraph, save_debug_html

PAGE_URL = "https://example.com/p/123"
FINAL_URL = "https://www.example.com/posts/generators"

_PARAGRAPHS = [
    "Generators let you produce values lazily, one at a time, instead of building a "
    "whole list in memory. That makes them ideal for streams, large files, and pipelines.",
    "A generator function looks like a normal function, except that it uses yield to "
    "hand a value back to the caller, pausing until the next value is requested.",
    "Because state lives in the suspended frame, generators can model infinite "
    "sequences, cooperative tasks, and parsers, all without extra bookkeeping classes.",
    "Finally, generator expressions give you the same laziness with comprehension "
    "syntax, and that is all. Subscribe to our newsletter for more posts, examples, and tips.",
]

ARTICLE_HTML = """
<!DOCTYPE html>
<html>
<head>
  <title>Understanding Python Generators</title>
  <meta name="author" content="  Jane Doe ">
  <meta property="og:title" content="Generators, explained">
  <meta property="og:image" content="/images/og.png">
  <meta property="article:published_time" content="2024-03-01T10:00:00Z">
  <script>window.tracking = true;</script>
</head>
<body>
  <header><a href="/">Site navigation link</a></header>
  <nav><a href="/about">About us</a></nav>
  <article>
    <h1>Understanding Python Generators</h1>
    <picture>
      <source srcset="/images/hero-800.webp 800w, /images/hero-1600.webp 1600w">
      <img src="/images/hero.jpg" alt="Hero" loading="lazy">
    </picture>
    %s
    <img src="diagram.png" decoding="async">
  </article>
  <div class="sidebar">Popular posts in the sidebar</div>
  <footer>Copyright footer text</footer>
</body>
</html>
""" % "\n    ".join(f"<p>{p}</p>" for p in _PARAGRAPHS)

NO_ARTICLE_HTML = """
<html>
<head><title>Nothing here</title></head>
<body>
  <nav><a href="/">Home</a><a href="/about">About</a></nav>
  <footer>Copyright 2024</footer>
  <script>var x = 1;</script>
</body>
</html>
"""


@pytest.fixture(autouse=True)
def debug_html_path(tmp_path, monkeypatch):
    path = tmp_path / "debug" / "article.html"
    monkeypatch.setattr(settings, "save_debug_html", True)
    monkeypatch.setattr(settings, "debug_html_path", str(path))
    return path


def _mock_fetch(html: str, final_url: str = FINAL_URL):
    return patch(
        "pagezen.services.extractor.fetch_url",
        new=AsyncMock(return_value=(html, final_url)),
    )


def _run(coro):
    return asyncio.run(coro)


class TestExtractArticle:
    def test_extracts_clean_article(self):
        with _mock_fetch(ARTICLE_HTML):
            article = _run(extract_article(PAGE_URL))

        assert article.url == PAGE_URL
        assert article.title == "Understanding Python Generators"
        assert article.author == "Jane Doe"
        assert article.published_at.startswith("2024-03-01T10:00:00")
        assert "produce values lazily" in article.content
        assert "yield" in article.content

    def test_chrome_and_boilerplate_are_removed(self):
        with _mock_fetch(ARTICLE_HTML):
            article = _run(extract_article(PAGE_URL))

        for noise in ("Site navigation link", "About us", "sidebar", "Copyright footer", "tracking"):
            assert noise not in article.content
        assert "subscribe to our newsletter" not in article.content.lower()

    def test_length_and_excerpt_are_consistent(self):
        with _mock_fetch(ARTICLE_HTML):
            article = _run(extract_article(PAGE_URL))

        assert article.length == len(article.content)
        assert len(article.content) > 200
        assert article.excerpt.endswith("...")
        assert article.content.startswith(article.excerpt[:-3])
        assert len(article.excerpt) <= 203

    def test_markdown_is_rendered(self):
        with _mock_fetch(ARTICLE_HTML):
            article = _run(extract_article(PAGE_URL))

        assert article.markdown
        assert "produce values lazily" in article.markdown
        assert "<p>" not in article.markdown

    def test_open_graph_is_embedded(self):
        with _mock_fetch(ARTICLE_HTML):
            article = _run(extract_article(PAGE_URL))

        og = article.open_graph
        assert og.title == "Generators, explained"
        assert og.author == "Jane Doe"
        # Image resolved against the post-redirect URL; canonical falls back to the request URL
        assert og.image == "https://www.example.com/images/og.png"
        assert og.url == PAGE_URL

    def test_images_rewritten_in_processed_document(self, debug_html_path):
        with _mock_fetch(ARTICLE_HTML):
            _run(extract_article(PAGE_URL))

        saved = debug_html_path.read_text(encoding="utf-8")
        assert "<picture" not in saved
        assert 'src="https://www.example.com/images/hero-1600.png"' in saved
        assert 'src="https://www.example.com/diagram.png"' in saved
        assert "loading=" not in saved
        assert "<nav" not in saved

    def test_boilerplate_patterns_can_be_replaced(self):
        with _mock_fetch(ARTICLE_HTML):
            article = _run(extract_article(PAGE_URL, boilerplate_patterns=()))
        assert "Subscribe to our newsletter" in article.content

    def test_page_without_article_fails(self):
        with _mock_fetch(NO_ARTICLE_HTML):
            with pytest.raises(ReadabilityError):
                _run(extract_article(PAGE_URL))

    def test_page_without_article_writes_no_debug_file(self, debug_html_path):
        with _mock_fetch(NO_ARTICLE_HTML):
            with pytest.raises(ReadabilityError):
                _run(extract_article(PAGE_URL))
        assert not debug_html_path.exists()


class TestFetchFailures:
    def test_transport_error_becomes_fetch_error(self):
        fetch = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        with patch("pagezen.services.extractor.fetch_url", new=fetch):
            with pytest.raises(FetchError, match="connection refused"):
                _run(extract_article(PAGE_URL))

    def test_timeout_becomes_fetch_error(self):
        fetch = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        with patch("pagezen.services.extractor.fetch_url", new=fetch):
            with pytest.raises(FetchError, match="timed out"):
                _run(extract_article(PAGE_URL))

    def test_oversize_body_becomes_fetch_error(self):
        fetch = AsyncMock(side_effect=RuntimeError("Response body exceeds the maximum allowed size."))
        with patch("pagezen.services.extractor.fetch_url", new=fetch):
            with pytest.raises(FetchError):
                _run(extract_opengraph(PAGE_URL))

    def test_invalid_url_propagates_value_error(self):
        fetch = AsyncMock(side_effect=ValueError("Scheme 'ftp' is not allowed."))
        with patch("pagezen.services.extractor.fetch_url", new=fetch):
            with pytest.raises(ValueError):
                _run(extract_article("ftp://example.com/file"))


class TestDebugHtml:
    def test_written_after_success(self, debug_html_path):
        with _mock_fetch(ARTICLE_HTML):
            _run(extract_article(PAGE_URL))
        assert debug_html_path.exists()

    def test_disabled(self, debug_html_path, monkeypatch):
        monkeypatch.setattr(settings, "save_debug_html", False)
        with _mock_fetch(ARTICLE_HTML):
            _run(extract_article(PAGE_URL))
        assert not debug_html_path.exists()

    def test_write_failure_does_not_fail_extraction(self, tmp_path, monkeypatch, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        monkeypatch.setattr(settings, "debug_html_path", str(blocker / "article.html"))

        with _mock_fetch(ARTICLE_HTML):
            with caplog.at_level(logging.ERROR):
                article = _run(extract_article(PAGE_URL))

        assert article.title == "Understanding Python Generators"
        assert "Failed to save debug HTML" in caplog.text

    def test_save_debug_html_swallows_os_error(self, tmp_path):
        from bs4 import BeautifulSoup

        blocker = tmp_path / "file"
        blocker.write_text("x")
        save_debug_html(BeautifulSoup("<p>x</p>", "lxml"), str(blocker / "sub" / "a.html"))


class TestExtractOpengraph:
    def test_returns_metadata_without_pruning(self):
        with _mock_fetch(ARTICLE_HTML), patch("pagezen.services.extractor.prune") as prune:
            metadata = _run(extract_opengraph(PAGE_URL))

        prune.assert_not_called()
        assert metadata.title == "Generators, explained"
        assert metadata.image == "https://www.example.com/images/og.png"
        assert metadata.author == "Jane Doe"
        assert metadata.published_at == "2024-03-01T10:00:00Z"

    def test_page_without_social_tags(self):
        with _mock_fetch(NO_ARTICLE_HTML):
            metadata = _run(extract_opengraph(PAGE_URL))
        assert metadata.title == "Nothing here"
        assert metadata.url == PAGE_URL
        assert metadata.description is None
