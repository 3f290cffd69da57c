import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict

from .types import RateLimitConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderQuota:
    """
    How many requests a provider accepts per window.

    Attributes:
        maxRequests: Requests allowed within one window
        windowSeconds: Window length in seconds
    """

    maxRequests: int
    windowSeconds: float

    def __post_init__(self):
        if self.maxRequests <= 0:
            raise ValueError(f"maxRequests must be positive, got {self.maxRequests}")
        if self.windowSeconds <= 0:
            raise ValueError(f"windowSeconds must be positive, got {self.windowSeconds}")

    @classmethod
    def fromConfig(cls, config: RateLimitConfig, default: "ProviderQuota") -> "ProviderQuota":
        """Build quota from a rate-limit table, missing keys fall back to default."""
        return cls(
            maxRequests=int(config.get("max-requests", default.maxRequests)),
            windowSeconds=float(config.get("window-seconds", default.windowSeconds)),
        )


DEFAULT_QUOTA = ProviderQuota(maxRequests=10, windowSeconds=1)


class SlidingWindowRateLimiter:
    """
    Sliding window limiter for one provider, dood!

    Remembers start times of the requests made within the last window. A
    request that would exceed the quota sleeps until the oldest one leaves
    the window. Waiters are served in arrival order.
    """

    def __init__(self, provider: str, quota: ProviderQuota = DEFAULT_QUOTA):
        self.provider = provider
        self.quota = quota
        self._startTimes: Deque[float] = deque()
        self._lock = asyncio.Lock()

    def _forgetExpired(self, now: float) -> None:
        while self._startTimes and now - self._startTimes[0] >= self.quota.windowSeconds:
            self._startTimes.popleft()

    async def acquire(self) -> None:
        async with self._lock:
            now = time.monotonic()
            self._forgetExpired(now)

            # Sleep may wake a tick early, so recheck
            while len(self._startTimes) >= self.quota.maxRequests:
                waitTime = self.quota.windowSeconds - (now - self._startTimes[0])
                logger.debug(f"{self.provider} quota exhausted, waiting {waitTime:.2f}s")
                await asyncio.sleep(max(waitTime, 0.001))
                now = time.monotonic()
                self._forgetExpired(now)

            self._startTimes.append(now)

    def getStats(self) -> Dict[str, Any]:
        self._forgetExpired(time.monotonic())
        return {
            "provider": self.provider,
            "requestsInWindow": len(self._startTimes),
            "maxRequests": self.quota.maxRequests,
            "windowSeconds": self.quota.windowSeconds,
        }
