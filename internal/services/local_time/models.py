"""
Local time models: resolution result and cached negative outcomes
"""

import datetime
import sys
from enum import StrEnum
from typing import Any, Type

from lib.place_search import InvalidQueryError, SoftGeocodeError, ZeroResultsError

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


class ResolvedTime(TypedDict):
    """Outcome of resolving a local wall-clock date at a place"""

    utc: datetime.datetime  # aware, UTC
    local: datetime.datetime  # naive, wall clock of timezone
    timezone: str
    timezoneOffset: float  # hours, fractional for :30 and :45 zones
    lat: float
    lng: float


class GeocodeFailureKind(StrEnum):
    """Soft place search outcomes which are remembered in cache"""

    ZERO_RESULTS = "ZERO_RESULTS"
    INVALID_QUERY = "INVALID_REQUEST"

    @classmethod
    def fromError(cls, error: SoftGeocodeError) -> "GeocodeFailureKind":
        match error:
            case InvalidQueryError():
                return cls.INVALID_QUERY
            case _:
                return cls.ZERO_RESULTS

    def errorClass(self) -> Type[SoftGeocodeError]:
        match self:
            case GeocodeFailureKind.INVALID_QUERY:
                return InvalidQueryError
            case _:
                return ZeroResultsError


class GeocodeFailure(TypedDict):
    """Cache sentinel standing for a soft place search failure"""

    failure: GeocodeFailureKind
    query: str
    message: str


def makeGeocodeFailure(error: SoftGeocodeError) -> GeocodeFailure:
    return GeocodeFailure(
        failure=GeocodeFailureKind.fromError(error),
        query=error.query,
        message=str(error),
    )


def isGeocodeFailure(value: Any) -> bool:
    return isinstance(value, dict) and "failure" in value


def geocodeFailureToError(sentinel: GeocodeFailure) -> SoftGeocodeError:
    """Rebuild the soft error a sentinel was made from"""
    kind = GeocodeFailureKind(sentinel["failure"])
    return kind.errorClass()(sentinel["message"], sentinel["query"], kind.value)
