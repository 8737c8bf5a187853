"""
Result cache.

Remembers LLM-path results by the exact trimmed note text, so each distinct
note costs at most one extraction call. Entries never expire; any edit to the
note changes the key.

Reads and writes are best effort. A store that cannot be read behaves like a
miss and a failed write is logged and dropped, so a broken cache only costs
latency.
"""

import json
from typing import Optional

from loomin.core.exceptions import CacheStoreError
from loomin.core.logging import get_logger
from loomin.simulation.models import PipelineResult, ResultSource
from loomin.storage.base import CacheStore

logger = get_logger(__name__)


def cache_key(text: str) -> str:
    """Cache key of a note: the full text with surrounding whitespace removed."""
    return text.strip()


class ResultCache:
    """Best-effort cache of pipeline results over a CacheStore."""

    def __init__(self, store: CacheStore) -> None:
        self.store = store

    async def get(self, text: str) -> Optional[PipelineResult]:
        """Stored result for the note, or None on a miss or read failure."""
        key = cache_key(text)
        try:
            raw = await self.store.find(key)
        except CacheStoreError as e:
            logger.warning("Cache read failed, treating as miss", error=str(e))
            return None
        if raw is None:
            return None

        try:
            return PipelineResult.from_dict(json.loads(raw), source=ResultSource.CACHE)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable cache entry", error=str(e))
            return None

    async def put(self, text: str, result: PipelineResult) -> bool:
        """Store a result. Returns False if the write failed."""
        key = cache_key(text)
        try:
            await self.store.create(key, json.dumps(result.to_dict()))
        except CacheStoreError as e:
            logger.warning("Cache write failed, continuing", error=str(e))
            return False
        return True

    async def size(self) -> int:
        """Number of cached results."""
        return await self.store.count()

    async def clear(self) -> int:
        """Remove every cached result."""
        return await self.store.clear()
