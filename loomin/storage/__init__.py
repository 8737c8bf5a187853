"""
Storage backends for the simulation result cache.

    from loomin.storage import get_cache_store
    store = get_cache_store(config)
"""

from loomin.storage.base import CacheStore
from loomin.storage.factory import get_cache_store
from loomin.storage.memory import InMemoryCacheStore

__all__ = ["CacheStore", "InMemoryCacheStore", "get_cache_store"]
