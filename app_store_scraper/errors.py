"""Exceptions raised by the App Store scraper."""

from typing import Optional


class AppStoreError(Exception):
    """Base class for all scraper errors."""


class MissingFieldError(AppStoreError, ValueError):
    """A required identifying option (id, appId, term, devId) was not supplied."""


class RangeError(AppStoreError, ValueError):
    """An option was outside the range the upstream endpoint serves."""


class NotFoundError(AppStoreError, LookupError):
    """A lookup returned no rows."""


class TokenExtractionError(AppStoreError):
    """The bearer token could not be scraped from the app page."""


class ValidationError(AppStoreError):
    """An upstream payload did not match the expected shape."""

    def __init__(self, message: str, path: str = "$"):
        super().__init__(message)
        self.path = path


class RequestError(AppStoreError):
    """An HTTP request failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
