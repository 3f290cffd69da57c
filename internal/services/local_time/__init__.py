"""
Local time module: resolve local wall-clock dates at named places into UTC
"""

from .errors import DateValidationError
from .models import GeocodeFailure, GeocodeFailureKind, ResolvedTime
from .service import (
    DEFAULT_CACHE_VERSION,
    LocalTimeResolver,
    buildQuery,
    makeLocationKey,
    makeResultKey,
    makeTimezoneKey,
    parseLocalDate,
)

__all__ = [
    # Service
    "LocalTimeResolver",
    "DEFAULT_CACHE_VERSION",
    "parseLocalDate",
    "buildQuery",
    "makeResultKey",
    "makeLocationKey",
    "makeTimezoneKey",
    # Models
    "ResolvedTime",
    "GeocodeFailure",
    "GeocodeFailureKind",
    # Errors
    "DateValidationError",
]
