from abc import ABC, abstractmethod


class RateLimiterInterface(ABC):
    """What provider clients need from a rate limiter: wait for a request slot."""

    @abstractmethod
    async def applyLimit(self, provider: str) -> None:
        """
        Wait until one more request to the provider fits into its quota.

        Args:
            provider: Provider name, e.g. "place-search" or "geonames"
        """
        pass
