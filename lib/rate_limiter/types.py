"""Type definitions for the rate limiter library."""

import sys
from typing import Dict, NotRequired

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


# Contents of a provider's rate-limit table, e.g.
# [geonames]
# rate-limit = { max-requests = 1000, window-seconds = 3600 }
RateLimitConfig = TypedDict(
    "RateLimitConfig",
    {
        "max-requests": NotRequired[int],
        "window-seconds": NotRequired[float],
    },
)

# Provider name ("place-search", "geonames") -> its rate-limit table
ProviderRateLimits = Dict[str, RateLimitConfig]
