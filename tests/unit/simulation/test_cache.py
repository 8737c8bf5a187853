"""Tests for the best-effort result cache."""

import json
from unittest.mock import AsyncMock, Mock

import pytest

from loomin.core.exceptions import CacheStoreError
from loomin.simulation.cache import ResultCache, cache_key
from loomin.simulation.models import (
    Extraction,
    PipelineResult,
    ResultSource,
    SimulationStatus,
    SimulationVerdict,
    Topic,
)


@pytest.fixture
def result() -> PipelineResult:
    return PipelineResult(
        extraction=Extraction(Topic.ROBOT_ARM, {"payload": 11, "arm_length": 6}),
        simulation=SimulationVerdict(
            status=SimulationStatus.CRITICAL_FAILURE,
            message="Torque (647 Nm) exceeded gear limit of 600 Nm.",
            recommendation="Reduce payload to 10.2 kg.",
            ai_explanation="The gears scream and shatter.",
        ),
        source=ResultSource.LLM,
    )


def test_cache_key_is_full_trimmed_text():
    long_note = "x" * 2000
    assert cache_key(f"  {long_note}\n") == long_note


@pytest.mark.asyncio
async def test_round_trip_marks_source_as_cache(memory_store, result):
    cache = ResultCache(memory_store)

    assert await cache.put("robot notes", result) is True
    cached = await cache.get("  robot notes  ")

    assert cached.source == ResultSource.CACHE
    assert cached.to_dict() == result.to_dict()


@pytest.mark.asyncio
async def test_distinct_long_notes_do_not_collide(memory_store, result):
    cache = ResultCache(memory_store)
    prefix = "a" * 600

    await cache.put(prefix + "one", result)

    assert await cache.get(prefix + "two") is None


@pytest.mark.asyncio
async def test_read_failure_is_a_miss():
    store = Mock()
    store.find = AsyncMock(side_effect=CacheStoreError("database locked"))

    assert await ResultCache(store).get("notes") is None


@pytest.mark.asyncio
async def test_write_failure_returns_false(result):
    store = Mock()
    store.create = AsyncMock(side_effect=CacheStoreError("disk full"))

    assert await ResultCache(store).put("notes", result) is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    ["not json", json.dumps([1]), json.dumps({"extraction": {}})],
)
async def test_unreadable_entry_is_a_miss(memory_store, raw):
    await memory_store.create("notes", raw)

    assert await ResultCache(memory_store).get("notes") is None


@pytest.mark.asyncio
async def test_size_and_clear(memory_store, result):
    cache = ResultCache(memory_store)
    await cache.put("one", result)
    await cache.put("two", result)

    assert await cache.size() == 2
    assert await cache.clear() == 2
    assert await cache.size() == 0
