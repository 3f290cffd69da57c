import logging
from threading import RLock
from typing import Any, Dict, Optional

from .interface import RateLimiterInterface
from .sliding_window import DEFAULT_QUOTA, ProviderQuota, SlidingWindowRateLimiter
from .types import ProviderRateLimits

logger = logging.getLogger(__name__)


class RateLimiterManager(RateLimiterInterface):
    """
    Process-wide registry of per-provider request quotas.

    Each provider gets its own SlidingWindowRateLimiter. Quotas come from the
    rate-limit table of the provider's config section; a provider without
    one gets DEFAULT_QUOTA on its first request.

    Usage:
        >>> manager = RateLimiterManager.getInstance()
        >>> await manager.loadConfig({"geonames": {"max-requests": 1000, "window-seconds": 3600}})
        >>> await manager.applyLimit("geonames")
    """

    _instance: Optional["RateLimiterManager"] = None
    _lock = RLock()

    def __new__(cls) -> "RateLimiterManager":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
            return cls._instance

    def __init__(self):
        # Runs on every RateLimiterManager() call
        if not hasattr(self, "_limiters"):
            self._limiters: Dict[str, SlidingWindowRateLimiter] = {}

    @classmethod
    def getInstance(cls) -> "RateLimiterManager":
        return cls()

    async def loadConfig(self, config: ProviderRateLimits) -> None:
        """
        Set quotas of providers named in config, dood!

        Raises:
            ValueError: If a quota is not positive
        """
        for provider, rateLimit in config.items():
            self.setQuota(provider, ProviderQuota.fromConfig(rateLimit, DEFAULT_QUOTA))

    def setQuota(self, provider: str, quota: ProviderQuota) -> None:
        """Replace quota of the provider. Requests already counted are forgotten."""
        self._limiters[provider] = SlidingWindowRateLimiter(provider, quota)
        logger.info(f"Rate limit for {provider}: {quota.maxRequests} requests per {quota.windowSeconds}s")

    def _getLimiter(self, provider: str) -> SlidingWindowRateLimiter:
        limiter = self._limiters.get(provider)
        if limiter is None:
            logger.debug(f"No rate limit configured for {provider}, using default")
            limiter = SlidingWindowRateLimiter(provider, DEFAULT_QUOTA)
            self._limiters[provider] = limiter
        return limiter

    async def applyLimit(self, provider: str) -> None:
        await self._getLimiter(provider).acquire()

    def getStats(self, provider: str) -> Dict[str, Any]:
        return self._getLimiter(provider).getStats()

    async def destroy(self) -> None:
        """Forget all quotas and request history (application shutdown)."""
        self._limiters.clear()
        logger.debug("RateLimiterManager cleared, dood!")
