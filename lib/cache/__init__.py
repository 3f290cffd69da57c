"""
lib.cache - Generic cache library for geotime, dood!

Core Components:
- CacheInterface: Abstract base class for all cache stores
- DictCache: Thread-safe dictionary-based store with TTL and size limit
- NullCache: No-op store
- CacheCoordinator: compute-once-per-key wrapper with dogpile prevention

Example Usage:
    >>> from lib.cache import CacheCoordinator, DictCache
    >>>
    >>> coordinator = CacheCoordinator(DictCache[str, Any](defaultTtl=None, maxSize=10000))
    >>>
    >>> async def lookup():
    ...     return await placeSearch.resolve("Paris, France")
    >>>
    >>> location = await coordinator.wrap("location:Paris, France:1.32", lookup)
"""

from .coordinator import CacheCoordinator
from .dict_cache import DictCache
from .errors import CacheBackendError
from .interface import CacheInterface
from .key_generator import StringKeyGenerator
from .null_cache import NullCache
from .types import K, KeyGenerator, Producer, T, V

__all__ = [
    # Core types
    "KeyGenerator",
    "Producer",
    "K",
    "V",
    "T",
    # Interfaces
    "CacheInterface",
    # Implementations
    "DictCache",
    "NullCache",
    "CacheCoordinator",
    # Key generators
    "StringKeyGenerator",
    # Errors
    "CacheBackendError",
]
