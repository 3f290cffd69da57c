"""
Rate Limiter Library

Keeps outgoing provider requests (place search, timezone lookup) within the
providers' quotas, one sliding window per provider.

Example:
    >>> from lib.rate_limiter import ProviderQuota, RateLimiterManager
    >>>
    >>> manager = RateLimiterManager.getInstance()
    >>> manager.setQuota("place-search", ProviderQuota(maxRequests=10, windowSeconds=1))
    >>> await manager.applyLimit("place-search")
"""

from .interface import RateLimiterInterface
from .manager import RateLimiterManager
from .sliding_window import DEFAULT_QUOTA, ProviderQuota, SlidingWindowRateLimiter
from .types import ProviderRateLimits, RateLimitConfig

__all__ = [
    "RateLimiterInterface",
    "RateLimiterManager",
    "SlidingWindowRateLimiter",
    "ProviderQuota",
    "DEFAULT_QUOTA",
    "RateLimitConfig",
    "ProviderRateLimits",
]
