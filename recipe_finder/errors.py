"""
Exception types raised by the recipe finder core.

Two kinds of failure reach callers:
- ValidationError: caller input failed a precondition (short search term, missing id).
  Always raised before any upstream request is made.
- TransportError: the upstream request failed (network, non-2xx status, undecodable body).
  Transport, HTTP and decode failures are all wrapped in this one type.
"""

from typing import Optional


class RecipeFinderError(Exception):
    """Base class for all errors raised by the recipe finder."""
    pass


class ValidationError(RecipeFinderError, ValueError):
    """
    Raised when caller-supplied input fails a precondition.

    Never retried: the same input will fail the same way.
    """
    pass


class TransportError(RecipeFinderError, RuntimeError):
    """
    Raised when an upstream request cannot be completed or decoded.

    Attributes:
        endpoint: The upstream endpoint (path and query) that was requested
        status_code: HTTP status code when the upstream answered with a failure, else None
    """

    def __init__(self, message: str, endpoint: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code
