"""
Abstract cache store interface for lib.cache, dood!

Every store the CacheCoordinator can sit on top of implements this contract.
Expiry and eviction policies belong to the store, not to the coordinator.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import K, V


class CacheInterface(ABC, Generic[K, V]):
    """
    Generic async key-value store, dood!

    Type Parameters:
        K: The key type
        V: The value type

    Implementations must treat a ``None`` result of get() as a miss, so
    ``None`` itself can not be cached.

    Example:
        >>> cache = DictCache[str, dict](keyGenerator=StringKeyGenerator(), defaultTtl=3600)
        >>> await cache.set("location:Paris:1.32", {"lat": 48.85, "lng": 2.35})
        >>> await cache.get("location:Paris:1.32")
        {'lat': 48.85, 'lng': 2.35}
    """

    @abstractmethod
    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        """
        Get cached value by key.

        Args:
            key: The cache key to retrieve
            ttl: Optional TTL override (seconds) for the expiration check.
                 If None, the store's default TTL applies.

        Returns:
            Optional[V]: The cached value if found and not expired, None otherwise

        Raises:
            CacheBackendError: If the backend itself fails
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V) -> bool:
        """
        Store value under key.

        Args:
            key: The cache key to store the value under
            value: The value to cache

        Returns:
            bool: True if the value was stored, False otherwise

        Raises:
            CacheBackendError: If the backend itself fails
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries from the store."""
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get store statistics, dood!

        Keys are implementation specific (entry count, size limits, TTL).
        """
        pass
