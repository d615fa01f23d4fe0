"""
Custom exceptions for WebDAV file manager operations.

Every failure the core can produce is a DavException subclass, so callers
can surface them uniformly.
"""
from typing import Optional


class DavException(Exception):
    """Base exception for all davpy errors."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status: HTTP status code (if a response was received)
        """
        self.status = status
        super().__init__(message)


class TransportError(DavException):
    """The server answered with a non-success status."""

    def __init__(self, status: int, body: str = "", method: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            status: HTTP status code of the response
            body: Response body, used as error detail
            method: HTTP method of the failed request
        """
        self.body = body
        self.method = method
        prefix = f"{method} failed" if method else "Request failed"
        message = f"{prefix}: HTTP {status}"
        if body and body.strip():
            message = f"{message}: {body.strip()}"
        super().__init__(message, status)


class NetworkError(DavException):
    """No response was obtained from the server."""
    pass


class ProtocolError(DavException):
    """Response received with success status but structurally invalid."""
    pass


class UnsupportedOperationError(DavException):
    """Operation rejected locally before any request was issued."""
    pass
