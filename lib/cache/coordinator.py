"""
Compute-once-per-key memoization on top of a cache store, dood!

CacheCoordinator.wrap() answers from the store when it can and otherwise runs
the producer exactly once per key, no matter how many callers ask for the same
key while the producer is running. Late callers attach to the in-flight
computation instead of starting their own.
"""

import asyncio
import logging
from typing import Any, Dict, Generic, Optional

from .interface import CacheInterface
from .types import Producer, V

logger = logging.getLogger(__name__)


class CacheCoordinator(Generic[V]):
    """
    Dogpile-preventing memoization wrapper, dood!

    The coordinator is content-agnostic: whatever the producer returns is
    stored, including negative-result sentinels. Producer exceptions reach
    every waiter of that computation and are never stored.

    The producer runs in its own task, so cancelling (or timing out) one
    caller does not cancel the computation other callers are waiting for, and
    its result still lands in the store.

    Example:
        >>> coordinator = CacheCoordinator(DictCache[str, Any](defaultTtl=None))
        >>>
        >>> async def fetchTimezone() -> str:
        ...     return await client.resolve({"lat": 48.85, "lng": 2.35})
        >>>
        >>> timezoneId = await coordinator.wrap("tz:[48.85,2.35]:1.32", fetchTimezone)
    """

    def __init__(self, store: CacheInterface[str, V], ttl: Optional[int] = None):
        """
        Initialize coordinator.

        Args:
            store: Cache store to read from and write to
            ttl: TTL passed to store lookups (None: store default)
        """
        self._store = store
        self._ttl = ttl
        self._inFlight: Dict[str, "asyncio.Future[V]"] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lockHolders: Dict[str, int] = {}
        self._stats: Dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "coalesced": 0,
        }

    @property
    def store(self) -> CacheInterface[str, V]:
        return self._store

    def _acquireKeyLock(self, key: str) -> asyncio.Lock:
        """Get (creating if needed) the lock of a key and register one more user"""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
            self._lockHolders[key] = 0
        self._lockHolders[key] += 1
        return lock

    def _releaseKeyLock(self, key: str) -> None:
        """Unregister lock user, dropping the lock once nobody uses it"""
        self._lockHolders[key] -= 1
        if self._lockHolders[key] == 0:
            del self._lockHolders[key]
            del self._locks[key]

    async def _produceAndStore(self, key: str, produce: Producer[V]) -> V:
        value = await produce()
        await self._store.set(key, value)
        logger.debug(f"Stored computed value for {key}")
        return value

    def _onComputationDone(self, key: str, future: "asyncio.Future[V]") -> None:
        if self._inFlight.get(key) is future:
            del self._inFlight[key]

        # Mark exception as retrieved: every waiter may have gone away already
        if not future.cancelled() and future.exception() is not None:
            logger.debug(f"Computation for {key} failed: {future.exception()!r}")

    async def wrap(self, key: str, produce: Producer[V], ttl: Optional[int] = None) -> V:
        """
        Get value for key, computing it with produce() on cache miss, dood!

        Args:
            key: Cache key (versioned by the caller)
            produce: Zero-argument coroutine function computing the value.
                     Must not return None.
            ttl: TTL override for this lookup (default: coordinator TTL)

        Returns:
            Cached or freshly computed value

        Raises:
            Exception: Whatever produce() raises (for every concurrent waiter),
                or whatever the store raises
        """
        if ttl is None:
            ttl = self._ttl

        lock = self._acquireKeyLock(key)
        try:
            async with lock:
                future = self._inFlight.get(key)
                if future is not None:
                    self._stats["coalesced"] += 1
                    logger.debug(f"Joining in-flight computation for {key}")
                else:
                    cached = await self._store.get(key, ttl)
                    if cached is not None:
                        self._stats["hits"] += 1
                        logger.debug(f"Cache hit for {key}")
                        return cached

                    self._stats["misses"] += 1
                    logger.debug(f"Cache miss for {key}, computing, dood!")
                    future = asyncio.ensure_future(self._produceAndStore(key, produce))
                    self._inFlight[key] = future
                    future.add_done_callback(lambda done: self._onComputationDone(key, done))
        finally:
            self._releaseKeyLock(key)

        return await asyncio.shield(future)

    def getStats(self) -> Dict[str, Any]:
        """
        Get coordinator statistics.

        Returns:
            Dict with hits, misses, coalesced waiter count, number of keys
            being computed right now and the store statistics
        """
        return {
            **self._stats,
            "inFlight": len(self._inFlight),
            "store": self._store.getStats(),
        }
