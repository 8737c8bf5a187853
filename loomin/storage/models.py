"""SQLAlchemy models for the simulation result cache."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SimulationCacheEntry(Base):
    """One cached pipeline result, keyed by the trimmed note text."""

    __tablename__ = "simulation_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)
    prompt = Column(Text, unique=True, nullable=False)
    result = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
