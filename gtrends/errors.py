"""Exception hierarchy for the gtrends package."""

from typing import Optional


class GtrendsError(Exception):
    """Base class for every error raised by gtrends."""


class InvalidArgument(GtrendsError, ValueError):
    """Malformed or out-of-range input, detected before any network call."""


class InvalidTimeFormat(InvalidArgument):
    """The ``time`` argument does not match any supported shape."""


class InvalidGeo(InvalidArgument):
    """A geo code is neither a country nor a subdivision code."""


class InvalidCategory(InvalidArgument):
    """A category id is not present in the category table."""


class RemoteError(GtrendsError):
    """Non-success HTTP status returned by the Trends service."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class TransientRemoteError(RemoteError):
    """Retryable remote error (429 rate-limit, 5xx server error)."""


class ParseError(GtrendsError):
    """Response body does not match the expected envelope or schema."""
