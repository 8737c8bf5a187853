"""
Notes-to-simulation pipeline.

    from loomin.simulation import build_pipeline
    result = await build_pipeline(config).evaluate("wind_speed = 80")
"""

from loomin.simulation.cache import ResultCache
from loomin.simulation.classifier import classify_topic, scene_mode_for
from loomin.simulation.explainer import FailureExplainer
from loomin.simulation.extractor import extract_variables
from loomin.simulation.llm_extractor import LLMExtractor
from loomin.simulation.models import (
    Extraction,
    PipelineResult,
    ResultSource,
    SimulationStatus,
    SimulationVerdict,
    Topic,
)
from loomin.simulation.physics import evaluate, failure_narrative
from loomin.simulation.pipeline import SimulationPipeline, build_pipeline
from loomin.simulation.units import normalize, parse_quantity

__all__ = [
    "Extraction",
    "FailureExplainer",
    "LLMExtractor",
    "PipelineResult",
    "ResultCache",
    "ResultSource",
    "SimulationPipeline",
    "SimulationStatus",
    "SimulationVerdict",
    "Topic",
    "build_pipeline",
    "classify_topic",
    "evaluate",
    "extract_variables",
    "failure_narrative",
    "normalize",
    "parse_quantity",
    "scene_mode_for",
]
