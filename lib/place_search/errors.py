"""
Place search failure classes

Soft failures are stable answers from the provider ("nothing matches this
query") and may be memoized. Hard failures are transient or unexpected and
must be retried.
"""

from typing import Optional

from lib.errors import GeotimeError


class GeocodeError(GeotimeError):
    """Base class for place search failures."""

    def __init__(self, message: str, query: str, status: Optional[str] = None):
        super().__init__(message)
        self.query = query
        self.status = status


class SoftGeocodeError(GeocodeError):
    """Provider answered, but there is no location for this query."""

    pass


class ZeroResultsError(SoftGeocodeError):
    """Query matched nothing (ZERO_RESULTS or an empty result list)."""

    pass


class InvalidQueryError(SoftGeocodeError):
    """Query was rejected as malformed (INVALID_REQUEST)."""

    pass


class HardGeocodeError(GeocodeError):
    """Transport error, HTTP error, quota/denial status or unexpected payload."""

    def __init__(
        self,
        message: str,
        query: str,
        status: Optional[str] = None,
        httpStatus: Optional[int] = None,
    ):
        super().__init__(message, query, status)
        self.httpStatus = httpStatus
