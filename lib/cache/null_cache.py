"""
Null cache store for lib.cache, dood!
"""

from typing import Any, Dict, Optional

from .interface import CacheInterface
from .types import K, V


class NullCache(CacheInterface[K, V]):
    """Store that never keeps anything, dood!

    With a NullCache below it the CacheCoordinator still coalesces
    concurrent calls, but every sequential call goes to the provider.

    Useful for:
    - Disabling caching in configuration
    - Measuring provider traffic without cache
    """

    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        """Always miss."""
        return None

    async def set(self, key: K, value: V) -> bool:
        """Drop the value but report success."""
        return True

    def clear(self) -> None:
        """Nothing to clear."""
        pass

    def getStats(self) -> Dict[str, Any]:
        """Report that caching is disabled."""
        return {"enabled": False}
