"""
Network access for gup.

This module performs the blocking HTTP GETs the updater needs:
- Fetching a small text document (the latest version string)
- Fetching a full archive into memory

There is no retry, no resume and no streaming: the whole response body is
buffered before control returns. Any status code >= 400 is treated as a
failure.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Type

import requests
from requests.exceptions import RequestException

from gup.core.exceptions import DownloadError, NetworkError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Status code and body of a successful GET."""

    status_code: int
    content: bytes

    @property
    def size(self) -> int:
        """Number of bytes in the body."""
        return len(self.content)


def fetch_bytes(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
    error_class: Type[NetworkError] = DownloadError,
) -> FetchResult:
    """
    Perform a blocking GET and return the full response body.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds (None uses the client default)
        session: Optional requests session to issue the request with
        error_class: NetworkError subclass raised on failure

    Returns:
        FetchResult with status code and body bytes

    Raises:
        NetworkError: On transport failure (status_code 0) or status >= 400
        ValueError: If URL is empty

    Example:
        >>> result = fetch_bytes("https://dl.google.com/go/go1.21.0.linux-amd64.tar.gz")
        >>> print(f"downloaded {result.size} bytes")
    """
    if not url:
        raise ValueError("URL cannot be empty")

    http = session if session is not None else requests

    logger.debug(f"GET {url}")

    try:
        response = http.get(url, timeout=timeout, allow_redirects=True)
    except RequestException as e:
        raise error_class(f"request to {url} failed. code: 0 err: {e}") from e

    if response.status_code >= 400:
        raise error_class(
            f"request to {url} failed. code: {response.status_code} "
            f"err: {response.reason}",
            status_code=response.status_code,
        )

    logger.debug(f"GET {url} -> {response.status_code} ({len(response.content)} bytes)")
    return FetchResult(status_code=response.status_code, content=response.content)


def fetch_text(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
    error_class: Type[NetworkError] = NetworkError,
) -> str:
    """
    Fetch a URL and return its body decoded as UTF-8, untrimmed.

    Raises:
        NetworkError: On transport failure or status >= 400, or if the body
            is not valid UTF-8
    """
    result = fetch_bytes(url, timeout=timeout, session=session, error_class=error_class)
    try:
        return result.content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise error_class(
            f"response from {url} is not valid UTF-8: {e}",
            status_code=result.status_code,
        ) from e


__all__ = ["FetchResult", "fetch_bytes", "fetch_text"]
