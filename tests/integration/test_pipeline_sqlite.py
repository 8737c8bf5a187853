"""
Integration tests: pipeline, SQLite cache and API together.

Only the LLM client is mocked.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from loomin.api.main import create_app
from loomin.simulation.models import ResultSource
from loomin.simulation.pipeline import build_pipeline
from loomin.storage.sql import SQLCacheStore

NOTE = "Our windmill prototype has a lot of blades and the storm is coming"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cached_result_survives_restart(config, mock_llm_client, temp_dir: Path):
    url = f"sqlite:///{temp_dir / 'cache.db'}"

    first_store = SQLCacheStore(url)
    first = await build_pipeline(config, client=mock_llm_client, store=first_store).evaluate(NOTE)
    first_store.close()

    second_store = SQLCacheStore(url)
    second = await build_pipeline(config, client=mock_llm_client, store=second_store).evaluate(NOTE)
    second_store.close()

    assert first.source == ResultSource.LLM
    assert second.source == ResultSource.CACHE
    assert second.to_dict() == first.to_dict()


@pytest.mark.integration
def test_api_over_sqlite(config, mock_llm_client, temp_dir: Path):
    config.storage.backend = "sqlite"
    config.storage.database_url = f"sqlite:///{temp_dir / 'api.db'}"
    pipeline = build_pipeline(config, client=mock_llm_client)

    with TestClient(create_app(config=config, pipeline=pipeline)) as client:
        first = client.post("/api/extract", json={"notes": NOTE})
        second = client.post("/api/extract", json={"notes": NOTE + "   "})
        health = client.get("/v1/health").json()

    assert first.json() == second.json()
    assert health["cache"]["backend"] == "sqlite"
    assert health["cache"]["entries"] == 1
