"""
In-memory dictionary cache store for lib.cache, dood!

Entries carry the time they were stored; expiration is checked on read
against the default TTL or the TTL passed to get(). When the store is full
the oldest entry is evicted.
"""

import logging
import time
from threading import RLock
from typing import Any, Dict, Optional, Tuple

from .interface import CacheInterface
from .key_generator import StringKeyGenerator
from .types import K, KeyGenerator, V

logger = logging.getLogger(__name__)


class DictCache(CacheInterface[K, V]):
    """
    Thread-safe in-memory cache with TTL and size limit, dood!

    Example:
        >>> cache = DictCache[str, dict](keyGenerator=StringKeyGenerator(), defaultTtl=600, maxSize=100)
        >>> await cache.set("tz:[48.85,2.35]:1.32", "Europe/Paris")
        >>> await cache.get("tz:[48.85,2.35]:1.32")
        'Europe/Paris'

    Note:
        A TTL of None or below zero disables expiration, a TTL of 0 expires
        everything. maxSize of 0 or None disables eviction.
    """

    def __init__(
        self,
        keyGenerator: Optional[KeyGenerator[K]] = None,
        defaultTtl: Optional[int] = 3600,
        maxSize: Optional[int] = 1000,
    ):
        """
        Initialize dictionary cache.

        Args:
            keyGenerator: Converts keys to storage strings (default: StringKeyGenerator)
            defaultTtl: Default time to live in seconds (default: 1 hour)
            maxSize: Maximum number of entries (default: 1000)
        """
        self._keyGenerator: KeyGenerator[Any] = keyGenerator if keyGenerator is not None else StringKeyGenerator()
        self._defaultTtl = defaultTtl
        self._maxSize = maxSize
        self._lock = RLock()
        self._storage: Dict[str, Tuple[V, float]] = {}

    def _isExpired(self, storedAt: float, ttl: Optional[int]) -> bool:
        """Check if entry stored at given timestamp is expired"""
        effectiveTtl = ttl if ttl is not None else self._defaultTtl
        if effectiveTtl is None or effectiveTtl < 0:
            return False
        return time.time() - storedAt >= effectiveTtl

    def _evictOldest(self) -> None:
        """Drop oldest entries until there is room for one more (lock must be held)"""
        if not self._maxSize:
            return

        while len(self._storage) >= self._maxSize:
            oldestKey = min(self._storage, key=lambda k: self._storage[k][1])
            del self._storage[oldestKey]
            logger.debug(f"Evicted oldest cache entry: {oldestKey}")

    async def get(self, key: K, ttl: Optional[int] = None) -> Optional[V]:
        storageKey = self._keyGenerator.generateKey(key)
        with self._lock:
            entry = self._storage.get(storageKey)
            if entry is None:
                return None

            value, storedAt = entry
            if self._isExpired(storedAt, ttl):
                del self._storage[storageKey]
                logger.debug(f"Removed expired cache entry: {storageKey}")
                return None

            return value

    async def set(self, key: K, value: V) -> bool:
        storageKey = self._keyGenerator.generateKey(key)
        with self._lock:
            if storageKey not in self._storage:
                self._evictOldest()
            self._storage[storageKey] = (value, time.time())
        return True

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
        logger.debug("Cleared all cache data, dood!")

    def getStats(self) -> Dict[str, Any]:
        with self._lock:
            entries = len(self._storage)
        return {
            "entries": entries,
            "maxSize": self._maxSize,
            "defaultTtl": self._defaultTtl,
            "threadSafe": True,
        }
