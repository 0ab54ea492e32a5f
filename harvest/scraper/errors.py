"""Exception hierarchy for the fetch → parse → extract pipeline.

Fetch, parse and selector errors are terminal for a run: there is no document
to extract from.  Extraction errors describe a single record and are collected
by :func:`~harvest.scraper.extractor.extract_all` instead of being propagated.
"""

from __future__ import annotations

from typing import Any


class HarvestError(Exception):
    """Base class for every error raised by the pipeline."""

    #: Pipeline stage the error belongs to; used when reporting a failed run.
    stage = "run"


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class FetchError(HarvestError):
    """The page could not be fetched."""

    stage = "fetch"


class InvalidLocator(FetchError):
    """The locator is not an absolute http(s) URL."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class NetworkError(FetchError):
    """Connection, timeout or protocol failure while talking to the server."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Network error fetching {url}: {reason}")


class UnsuccessfulStatus(FetchError):
    """The server answered with a non-2xx status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} from {url}")


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class ParseError(HarvestError):
    """The payload is not text markup (e.g. an image or other binary blob)."""

    stage = "parse"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Cannot parse document: {reason}")


class SelectorError(HarvestError):
    """A CSS selector could not be compiled."""

    stage = "query"

    def __init__(self, selector: str, reason: str) -> None:
        self.selector = selector
        self.reason = reason
        super().__init__(f"Invalid CSS selector {selector!r}: {reason}")


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

class ExtractionError(HarvestError):
    """A single record could not be extracted from its node."""

    stage = "extract"


class MissingAttribute(ExtractionError):
    """The node selected for an attribute field has no such attribute."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing attribute {name!r}")


class NoMatch(ExtractionError):
    """A field's sub-query matched nothing below the record's node."""

    def __init__(self, query: Any) -> None:
        self.query = query
        super().__init__(f"No element matches {query!r}")
