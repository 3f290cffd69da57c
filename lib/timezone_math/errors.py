"""Errors raised by timezone arithmetic."""

from lib.errors import GeotimeError


class UnknownTimezoneError(GeotimeError, ValueError):
    """Raised when an IANA timezone identifier can not be loaded."""

    def __init__(self, timezoneId: str):
        super().__init__(f"Unknown timezone: {timezoneId!r}")
        self.timezoneId = timezoneId
