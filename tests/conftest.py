"""
Shared pytest fixtures and configuration for Loomin tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for file operations
- **config**: Real Config objects with an in-memory cache
- **mock_llm_client**: AsyncMock LLM client with a canned extraction
- **memory_store**: In-memory cache store
- **make_pipeline**: Factory wiring the above into a SimulationPipeline
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from loomin.core.config import Config
from loomin.core.logging import configure_logging
from loomin.llm.base import LLMClient
from loomin.simulation.cache import ResultCache
from loomin.simulation.explainer import FailureExplainer
from loomin.simulation.llm_extractor import LLMExtractor
from loomin.simulation.pipeline import SimulationPipeline
from loomin.storage.memory import InMemoryCacheStore


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests spanning several layers")


# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore INFO logging after tests that reconfigure it (e.g. CLI runs)."""
    yield
    configure_logging(level="INFO")


# ============================================================================
# Path and Config Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove Loomin and provider environment variables for the test."""
    for name in (
        "GROQ_API_KEY",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "LOOMIN_LLM_PROVIDER",
        "LOOMIN_LLM_MODEL",
        "LOOMIN_LLM_TEMPERATURE",
        "LOOMIN_STORAGE_BACKEND",
        "LOOMIN_DATABASE_URL",
        "LOOMIN_FALLBACK_TOPIC",
        "LOOMIN_EXPLAIN_FAILURES",
        "LOOMIN_API_HOST",
        "LOOMIN_API_PORT",
        "LOOMIN_CORS_ORIGINS",
        "LOOMIN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config(temp_dir: Path) -> Config:
    """Config rooted in a temp directory with the in-memory cache backend."""
    cfg = Config()
    cfg._base_path = temp_dir
    cfg.storage.backend = "memory"
    return cfg


# ============================================================================
# LLM Fixtures
# ============================================================================


@pytest.fixture
def extraction_payload() -> Dict[str, Any]:
    """Canned extraction the mock LLM returns."""
    return {"topic": "wind_turbine", "vars": {"wind_speed": 80, "blade_count": 3}}


@pytest.fixture
def mock_llm_client(extraction_payload: Dict[str, Any]) -> Mock:
    """Mock LLM client answering every call with the canned extraction.

    Example:
        async def test_llm_call(mock_llm_client):
            text = await mock_llm_client.generate_with_context("sys", "user")
    """
    client = Mock(spec=LLMClient)
    client.generate_with_context = AsyncMock(
        return_value=json.dumps(extraction_payload)
    )
    client.model_name = "mock-model"
    client.is_available.return_value = True
    return client


# ============================================================================
# Storage and Pipeline Fixtures
# ============================================================================


@pytest.fixture
def memory_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def make_pipeline(memory_store: InMemoryCacheStore, mock_llm_client: Mock):
    """Factory fixture for SimulationPipeline instances.

    Example:
        def test_pipeline(make_pipeline):
            pipeline = make_pipeline(explain=False)
    """

    def _make_pipeline(
        client: Optional[Any] = None,
        store: Optional[Any] = None,
        explain: bool = True,
        config: Optional[Config] = None,
    ) -> SimulationPipeline:
        llm = client or mock_llm_client
        pipeline_config = (config or Config()).pipeline
        return SimulationPipeline(
            llm_extractor=LLMExtractor(llm),
            explainer=FailureExplainer(llm) if explain else None,
            cache=ResultCache(store if store is not None else memory_store),
            config=pipeline_config,
        )

    return _make_pipeline
