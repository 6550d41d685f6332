"""Failure types raised by the extraction pipeline.

Every subclass of :class:`ExtractionError` is fatal to the current request
and is turned into a ``success=false`` envelope by the routers.  URL
validation failures stay plain :class:`ValueError`, matching the fetcher.
"""


class ExtractionError(Exception):
    """Base class for pipeline failures."""


class FetchError(ExtractionError):
    """The source URL could not be fetched (network error, timeout, size cap, redirects)."""


class ParseError(ExtractionError):
    """The response body could not be parsed into a document."""


class ReadabilityError(ExtractionError):
    """No article content could be identified in the document."""
