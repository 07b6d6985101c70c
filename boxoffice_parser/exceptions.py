"""
Custom exceptions for the box office parser.

Error philosophy:
  - CacheDirectoryUnavailable → FAIL HARD before any network traffic.
  - FetchFailed               → FAIL HARD: the document and therefore the run is lost.
  - RequiredElementMissing    → FAIL HARD: the page no longer has the layout we parse.

Optional fields (missing labels, unknown genres or distributors, unparseable
optional numbers) are not errors at all: extractors resolve them to None or
an empty value and move on.  Nothing here is caught and retried by the
orchestrator, so the first failure aborts the whole batch.
"""

from typing import Optional


class BoxOfficeError(Exception):
    """Base exception for all box office parser errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to a JSON-friendly error payload."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


class CacheDirectoryUnavailable(BoxOfficeError):
    """Raised when the page cache directory cannot be created."""

    def __init__(self, path: str, details: Optional[dict] = None):
        super().__init__(f"Could not create cache folder: {path}", details)
        self.path = path


class FetchFailed(BoxOfficeError):
    """
    Raised when a single GET fails at the transport layer.

    Covers DNS errors, timeouts, TLS failures and non-2xx responses alike.
    """

    def __init__(self, url: str, reason: str = "", details: Optional[dict] = None):
        message = f"Failed to fetch {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details)
        self.url = url
        self.reason = reason


class RequiredElementMissing(BoxOfficeError):
    """Raised when a structural anchor of a known page layout is absent."""

    def __init__(self, element: str, page: str = "", details: Optional[dict] = None):
        message = f"Required element '{element}' not found"
        if page:
            message = f"{message} on {page}"
        super().__init__(message, details)
        self.element = element
        self.page = page
