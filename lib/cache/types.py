"""
Core type definitions and protocols for lib.cache, dood!
"""

from typing import Awaitable, Callable, Protocol, TypeVar

# Type variables for generic cache operations
K = TypeVar("K")  # Key type - can be any hashable type
V = TypeVar("V")  # Value type - can be any type
T = TypeVar("T", contravariant=True)  # Generic object type for key generators

# Zero-argument factory of the value to cache, awaited only on cache miss
Producer = Callable[[], Awaitable[V]]


class KeyGenerator(Protocol[T]):
    """
    Protocol for turning objects into storage keys, dood!

    Type Parameters:
        T: The type of objects that can be converted to cache keys

    Example:
        >>> class UpperKeyGenerator(KeyGenerator[str]):
        ...     def generateKey(self, obj: str) -> str:
        ...         return obj.upper()
    """

    def generateKey(self, obj: T) -> str:
        """
        Generate string cache key from object.

        Args:
            obj: The object to convert to a cache key

        Returns:
            str: A string representation suitable for use as a cache key
        """
        ...
