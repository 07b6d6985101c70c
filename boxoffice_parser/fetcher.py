"""
Blocking HTTP retrieval of a single page.

One GET per call, no retry and no rate limiting: a failure surfaces as
FetchFailed and the caller decides what that means (in practice, the run
stops).
"""

from typing import Optional

import requests

from .config import DEFAULT_HEADERS
from .exceptions import FetchFailed
from .logger import get_module_logger

logger = get_module_logger("fetcher")


class Fetcher:
    """Fetches raw page bytes over HTTP."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        headers: Optional[dict] = None,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(headers or DEFAULT_HEADERS)

    def fetch(self, url: str) -> bytes:
        """
        GET a URL and return the response body.

        Raises:
            FetchFailed: on any transport error or non-2xx status
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
            logger.debug(f"GET {url} -> {response.status_code}")
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Request failed for {url}: {e}")
            raise FetchFailed(url, reason=str(e), details={"error": type(e).__name__})

        return response.content
