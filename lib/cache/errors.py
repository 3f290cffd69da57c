"""Errors raised by cache stores."""

from lib.errors import GeotimeError


class CacheBackendError(GeotimeError):
    """Raised when a cache backend itself fails (storage unavailable, corrupt entry, etc.)"""

    pass
