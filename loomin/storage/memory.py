"""In-process cache store for tests and throwaway runs."""

from typing import Dict, Optional


class InMemoryCacheStore:
    """Dictionary-backed CacheStore. Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    async def find(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    async def create(self, key: str, value: str) -> None:
        self._entries[key] = value

    async def count(self) -> int:
        return len(self._entries)

    async def clear(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        return removed

    def close(self) -> None:
        pass
