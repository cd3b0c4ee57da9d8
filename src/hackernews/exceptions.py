"""Exceptions raised by the Hacker News client.

A missing entity is never an exception: the API answers ``null`` and the
client returns ``None``. Everything else that goes wrong surfaces as one of
the classes below, with the original httpx / pydantic error chained.
"""

from typing import Optional


class HackerNewsError(Exception):
    """Base exception for Hacker News API errors."""

    def __init__(self, message: str, url: Optional[str] = None):
        """Initialize with the URL that was being fetched.

        Args:
            message: Error message
            url: Full request URL, if known
        """
        super().__init__(message)
        self.url = url

    def __str__(self):
        """String representation with URL if available."""
        base = super().__str__()
        if self.url:
            return f"{base} [{self.url}]"
        return base


class TransportError(HackerNewsError):
    """Request failed: connection, DNS, timeout or non-2xx status."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        """Initialize transport error.

        Args:
            message: Error message
            url: Full request URL
            status_code: HTTP status code if a response was received
        """
        super().__init__(message, url)
        self.status_code = status_code


class DecodeError(HackerNewsError):
    """Response body is not JSON or does not match the expected shape."""
