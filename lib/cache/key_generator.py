"""
Built-in key generator implementations for lib.cache
"""

from .types import KeyGenerator


class StringKeyGenerator(KeyGenerator[str]):
    """
    Pass-through key generator for already composed string keys, dood!

    Cache keys built by the resolver ("location:Paris, France:1.32") are
    readable strings and are stored as-is.

    Example:
        >>> generator = StringKeyGenerator()
        >>> generator.generateKey("tz:[48.85,2.35]:1.32")
        'tz:[48.85,2.35]:1.32'
    """

    def generateKey(self, obj: str) -> str:
        """
        Return string key unchanged.

        Raises:
            TypeError: If obj is not a string
        """
        if not isinstance(obj, str):
            raise TypeError(f"StringKeyGenerator expects string input, got {type(obj).__name__}, dood!")

        return obj
