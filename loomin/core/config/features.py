"""
Feature configuration classes.

Settings for the simulation pipeline itself, the HTTP API server and log output.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class PipelineConfig:
    """Simulation pipeline behavior."""

    # Topic reported when the LLM extraction fails
    fallback_topic: str = "generic"
    # Persist degraded (fallback) LLM results in the cache
    cache_fallback_results: bool = False
    # Ask the LLM for a failure narrative on CRITICAL_FAILURE
    explain_failures: bool = True


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    """Log output configuration."""

    level: str = "INFO"
    file: str = ""
