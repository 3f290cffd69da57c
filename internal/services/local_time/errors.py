"""
Local time resolution errors
"""

from typing import Any

from lib.errors import GeotimeError


class DateValidationError(GeotimeError, ValueError):
    """Date is neither a datetime nor a string of a supported shape, or is not a real calendar date."""

    def __init__(self, value: Any):
        super().__init__(
            f"Date should be in format YYYY-MM-DD HH:mm or YYYY-MM-DDTHH:mm[:ss[.sss]][Z], got {value!r}"
        )
        self.value = value
