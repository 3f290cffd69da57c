"""Timezone lookup failures."""

from typing import Optional

from lib.errors import GeotimeError


class TimezoneLookupError(GeotimeError):
    """Timezone identifier could not be obtained for coordinates (hard failure, retryable)."""

    def __init__(
        self,
        message: str,
        lat: float,
        lng: float,
        httpStatus: Optional[int] = None,
        providerCode: Optional[int] = None,
    ):
        super().__init__(message)
        self.lat = lat
        self.lng = lng
        self.httpStatus = httpStatus
        self.providerCode = providerCode
