"""HTTP fetcher: one blocking GET per call, no retries."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from harvest.config import settings
from harvest.scraper.errors import InvalidLocator, NetworkError, UnsuccessfulStatus
from harvest.scraper.models import RawDocument

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http", "https")


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def _validate_locator(url: str) -> httpx.URL:
    """Return *url* as an :class:`httpx.URL` or raise :class:`InvalidLocator`."""
    if not isinstance(url, str):
        raise InvalidLocator(repr(url), "URL must be a string")
    if not url.strip():
        raise InvalidLocator(url, "URL is empty")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidLocator(url, str(exc)) from exc
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise InvalidLocator(url, "scheme must be http or https")
    if not parsed.host:
        raise InvalidLocator(url, "URL has no host")
    return parsed


def _to_document(response: httpx.Response) -> RawDocument:
    return RawDocument(
        url=str(response.url),
        content=response.content,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
        encoding=response.charset_encoding,
    )


def fetch(
    url: str,
    *,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
) -> RawDocument:
    """Fetch *url* and return a :class:`RawDocument`.

    A single attempt is made.  When *client* is given it is used as-is and
    left open; otherwise a short-lived client is built from
    :data:`harvest.config.settings`.

    Raises:
        InvalidLocator: If *url* is not an absolute http(s) URL.
        NetworkError: On connection, timeout or protocol failures.
        UnsuccessfulStatus: If the server returns a non-2xx status code.
    """
    _validate_locator(url)

    logger.debug("GET %s (timeout=%s)", url, timeout)
    try:
        if client is not None:
            # An injected client keeps its own timeout unless one is given here.
            if timeout is None:
                response = client.get(url)
            else:
                response = client.get(url, timeout=timeout)
        else:
            if timeout is None:
                timeout = settings.request_timeout
            with httpx.Client(
                headers=_default_headers(),
                timeout=timeout,
                follow_redirects=settings.follow_redirects,
            ) as own_client:
                response = own_client.get(url)
    except httpx.TimeoutException as exc:
        raise NetworkError(url, "timed out" if timeout is None else f"timed out after {timeout}s") from exc
    except httpx.RequestError as exc:
        raise NetworkError(url, str(exc) or type(exc).__name__) from exc

    if not response.is_success:
        logger.warning("GET %s returned HTTP %d", url, response.status_code)
        raise UnsuccessfulStatus(response.status_code, url)

    document = _to_document(response)
    logger.info("Fetched %s: HTTP %d, %d bytes", url, document.status_code, len(document.content))
    return document
