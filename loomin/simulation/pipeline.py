"""
Simulation pipeline orchestration.

Sequences extraction, evaluation, narration and caching for one note.

State machine
-------------
    DIRECT_TRY ──hit──→ EVALUATE → done                (never cached)
        │
       miss
        ↓
    CACHE_LOOKUP ──hit──→ stored result → done
        │
       miss
        ↓
    LLM_EXTRACT → EVALUATE → EXPLAIN (failures only) → CACHE_WRITE → done

Invariants
----------
- ``vars`` always carries a ``Scene_Mode``. On the direct path a value the note
  set itself is kept; otherwise it is derived from the topic.
- Input that is not a string raises InvalidNotesError. An unexpected error
  in a stage propagates as ProcessingError; partial results are never
  returned.
- Degraded (fallback) LLM extractions are not cached unless
  ``pipeline.cache_fallback_results`` is set, so a provider outage does not
  pin a note to the fallback answer.

Components are injected, so one pipeline (and one cache store connection) is
built per process and shared by every request.
"""

import uuid
from typing import Any, Optional

from loomin.core.config import Config, PipelineConfig
from loomin.core.exceptions import InvalidNotesError, LoominError, ProcessingError
from loomin.core.logging import PipelineLogger
from loomin.llm.base import LLMClient
from loomin.llm.factory import (
    EXPLANATION_TASK,
    EXTRACTION_TASK,
    get_generation_config,
    get_llm_client,
)
from loomin.simulation.cache import ResultCache
from loomin.simulation.classifier import classify_topic, scene_mode_for
from loomin.simulation.explainer import FailureExplainer
from loomin.simulation.extractor import extract_variables
from loomin.simulation.llm_extractor import LLMExtractor
from loomin.simulation.models import (
    CanonicalVariables,
    Extraction,
    PipelineResult,
    ResultSource,
    Topic,
)
from loomin.simulation.physics import evaluate, failure_narrative
from loomin.storage.base import CacheStore
from loomin.storage.factory import get_cache_store

SCENE_MODE_KEY = "Scene_Mode"


def with_scene_mode(
    variables: CanonicalVariables, topic: Topic, keep_existing: bool = True
) -> CanonicalVariables:
    """Copy of variables with a Scene_Mode matching topic."""
    result = dict(variables)
    if keep_existing and SCENE_MODE_KEY in result:
        return result
    result[SCENE_MODE_KEY] = scene_mode_for(topic)
    return result


class SimulationPipeline:
    """
    Evaluate notes into simulation verdicts.

    Args:
        llm_extractor: Adapter used when direct extraction finds nothing
        explainer: Failure narrator for the LLM path (None disables narration)
        cache: Result cache for the LLM path
        config: Pipeline behavior switches
    """

    def __init__(
        self,
        llm_extractor: LLMExtractor,
        explainer: Optional[FailureExplainer],
        cache: ResultCache,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self.llm_extractor = llm_extractor
        self.explainer = explainer
        self.cache = cache
        self.config = config or PipelineConfig()

    async def evaluate(self, text: Any) -> PipelineResult:
        """
        Run one note through the pipeline.

        Args:
            text: Raw note text

        Returns:
            The extraction and verdict, tagged with the branch that produced it

        Raises:
            InvalidNotesError: If text is not a string
            ProcessingError: If a stage fails unexpectedly
        """
        if not isinstance(text, str):
            raise InvalidNotesError(
                f"notes must be a string, got {type(text).__name__}"
            )

        plog = PipelineLogger(uuid.uuid4().hex[:12])
        try:
            result = await self._run(text, plog)
        except LoominError as e:
            plog.finish(success=False, error=str(e))
            raise
        except Exception as e:
            stage = plog.current_stage
            plog.finish(success=False, error=str(e))
            raise ProcessingError(f"Pipeline failed at stage {stage}: {e}") from e
        plog.finish(
            success=True,
            source=result.source.value,
            status=result.simulation.status.value,
        )
        return result

    async def _run(self, text: str, plog: PipelineLogger) -> PipelineResult:
        plog.start_stage("direct")
        direct_vars = extract_variables(text)
        if direct_vars:
            return self._evaluate_direct(text, direct_vars, plog)

        plog.start_stage("cache")
        cached = await self.cache.get(text)
        if cached is not None:
            return cached

        plog.start_stage("llm")
        extraction = await self.llm_extractor.extract(text)
        return await self._evaluate_llm(text, extraction, plog)

    def _evaluate_direct(
        self, text: str, variables: CanonicalVariables, plog: PipelineLogger
    ) -> PipelineResult:
        topic = classify_topic(text, variables.get(SCENE_MODE_KEY))
        variables = with_scene_mode(variables, topic)

        plog.start_stage("evaluate")
        verdict = evaluate(topic, variables)
        if verdict.is_failure:
            verdict = verdict.with_explanation(
                failure_narrative(topic, variables, verdict)
            )
        return PipelineResult(
            extraction=Extraction(topic=topic, vars=variables),
            simulation=verdict,
            source=ResultSource.DIRECT,
        )

    async def _evaluate_llm(
        self, text: str, extraction: Extraction, plog: PipelineLogger
    ) -> PipelineResult:
        variables = with_scene_mode(
            extraction.vars, extraction.topic, keep_existing=False
        )

        plog.start_stage("evaluate")
        verdict = evaluate(extraction.topic, variables)

        if verdict.is_failure and self.explainer is not None:
            plog.start_stage("explain")
            explanation = await self.explainer.explain(
                extraction.topic, variables, verdict.message
            )
            verdict = verdict.with_explanation(explanation)

        result = PipelineResult(
            extraction=Extraction(
                topic=extraction.topic, vars=variables, degraded=extraction.degraded
            ),
            simulation=verdict,
            source=ResultSource.LLM,
        )

        if not extraction.degraded or self.config.cache_fallback_results:
            plog.start_stage("cache_write")
            await self.cache.put(text, result)
        else:
            plog.log_progress("Skipping cache write for fallback extraction")
        return result


def build_pipeline(
    config: Config,
    client: Optional[LLMClient] = None,
    store: Optional[CacheStore] = None,
) -> SimulationPipeline:
    """
    Assemble a pipeline from configuration.

    Args:
        config: Loomin configuration
        client: LLM client (built from config when omitted)
        store: Cache store (built from config when omitted)

    Returns:
        A ready SimulationPipeline
    """
    if client is None:
        client = get_llm_client(config)
    if store is None:
        store = get_cache_store(config)

    extractor = LLMExtractor(
        client,
        generation_config=get_generation_config(config, EXTRACTION_TASK),
        fallback_topic=Topic.parse(config.pipeline.fallback_topic),
    )
    explainer = None
    if config.pipeline.explain_failures:
        explainer = FailureExplainer(
            client,
            generation_config=get_generation_config(
                config, EXPLANATION_TASK, max_tokens=200
            ),
        )
    return SimulationPipeline(
        llm_extractor=extractor,
        explainer=explainer,
        cache=ResultCache(store),
        config=config.pipeline,
    )
