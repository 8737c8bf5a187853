"""
SQL-backed cache store.

Persists pipeline results through SQLAlchemy. SQLite is the default database;
any SQLAlchemy URL works. Sessions are synchronous and short; each coroutine
runs its session on a worker thread with ``asyncio.to_thread`` so the event
loop keeps serving other requests while the database works.
"""

import asyncio
import threading
from contextlib import nullcontext
from typing import Any, ContextManager, Dict, Optional

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from loomin.core.exceptions import CacheStoreError
from loomin.core.logging import get_logger
from loomin.storage.models import Base, SimulationCacheEntry

logger = get_logger(__name__)


def _is_memory_url(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Engine keyword arguments for the given URL."""
    if not database_url.startswith("sqlite"):
        return {}
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    # A pure in-memory database exists per connection; share a single one
    if _is_memory_url(database_url):
        options["poolclass"] = StaticPool
    return options


class SQLCacheStore:
    """
    SQLAlchemy-backed CacheStore.

    One row per trimmed note text; writing an existing key replaces its value.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """Initialize engine, session factory and schema."""
        assert database_url, "Database URL cannot be empty"
        self.database_url = database_url
        # One shared in-memory connection must not run two sessions at once
        self._lock: ContextManager[Any] = (
            threading.Lock() if _is_memory_url(database_url) else nullcontext()
        )
        try:
            self.engine = create_engine(
                database_url, echo=echo, **_engine_options(database_url)
            )
            self.SessionLocal = sessionmaker(
                autocommit=False, autoflush=False, bind=self.engine
            )
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cannot open cache database: {e}") from e

    async def find(self, key: str) -> Optional[str]:
        """Return the stored result for a note, or None."""
        try:
            return await asyncio.to_thread(self._find, key)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache lookup failed: {e}") from e

    async def create(self, key: str, value: str) -> None:
        """Insert or overwrite the entry for a note."""
        try:
            await asyncio.to_thread(self._create, key, value)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache write failed: {e}") from e

    async def count(self) -> int:
        """Number of cached results."""
        try:
            return await asyncio.to_thread(self._count)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache count failed: {e}") from e

    async def clear(self) -> int:
        """Delete every cached result."""
        try:
            removed = await asyncio.to_thread(self._clear)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache clear failed: {e}") from e
        logger.info("Simulation cache cleared", removed=removed)
        return removed

    def close(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()

    # Blocking session work, run on a worker thread by the coroutines above

    def _find(self, key: str) -> Optional[str]:
        with self._lock, self.SessionLocal() as session:
            return session.execute(
                select(SimulationCacheEntry.result).where(
                    SimulationCacheEntry.prompt == key
                )
            ).scalar_one_or_none()

    def _create(self, key: str, value: str) -> None:
        try:
            self._upsert(key, value)
        except IntegrityError:
            # A concurrent writer inserted the same key first
            self._upsert(key, value)

    def _upsert(self, key: str, value: str) -> None:
        with self._lock, self.SessionLocal() as session:
            try:
                entry = session.execute(
                    select(SimulationCacheEntry).where(
                        SimulationCacheEntry.prompt == key
                    )
                ).scalar_one_or_none()
                if entry is None:
                    session.add(SimulationCacheEntry(prompt=key, result=value))
                else:
                    entry.result = value
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise

    def _count(self) -> int:
        with self._lock, self.SessionLocal() as session:
            return session.execute(
                select(func.count()).select_from(SimulationCacheEntry)
            ).scalar_one()

    def _clear(self) -> int:
        with self._lock, self.SessionLocal() as session:
            removed = session.execute(delete(SimulationCacheEntry)).rowcount
            session.commit()
        return removed or 0
