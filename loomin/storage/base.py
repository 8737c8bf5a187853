"""
Cache store interface.

The result cache treats its backend as a plain key-value store of strings:
the trimmed note text maps to the JSON of one pipeline result.
"""

from typing import Optional, Protocol


class CacheStore(Protocol):
    """Abstract interface for simulation result cache backends.

    Implementations raise CacheStoreError when the backend cannot be reached;
    the ResultCache decides how to degrade.
    """

    async def find(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        ...

    async def create(self, key: str, value: str) -> None:
        """Store value under key. An existing entry is overwritten."""
        ...

    async def count(self) -> int:
        """Number of stored entries."""
        ...

    async def clear(self) -> int:
        """Remove every entry. Returns how many were removed."""
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...
