"""
Cache store factory.

Create the result cache backend named by ``storage.backend``.
"""

from typing import Callable, Dict

from loomin.core.config import Config
from loomin.core.logging import get_logger
from loomin.storage.base import CacheStore

logger = get_logger(__name__)


def _create_sqlite_store(config: Config) -> CacheStore:
    from loomin.storage.sql import SQLCacheStore

    if not config.storage.database_url:
        config.ensure_directories()
    return SQLCacheStore(config.database_url, echo=config.storage.echo)


def _create_memory_store(config: Config) -> CacheStore:
    from loomin.storage.memory import InMemoryCacheStore

    return InMemoryCacheStore()


def get_cache_store(config: Config) -> CacheStore:
    """
    Get the cache store backend based on configuration.

    Rule #1: Dictionary dispatch eliminates nesting

    Args:
        config: Loomin configuration

    Returns:
        CacheStore instance

    Raises:
        ValueError: If backend is unknown
        CacheStoreError: If the database cannot be opened
    """
    factories: Dict[str, Callable[[Config], CacheStore]] = {
        "sqlite": _create_sqlite_store,
        "memory": _create_memory_store,
    }
    factory = factories.get(config.storage.backend)
    if factory is None:
        raise ValueError(f"Unknown storage backend: {config.storage.backend}")
    store = factory(config)
    logger.debug("Cache store created", backend=config.storage.backend)
    return store
