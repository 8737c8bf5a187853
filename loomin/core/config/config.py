"""
Main configuration class for Loomin.

This module provides the Config dataclass that aggregates all sub-configs
and handles initialization, validation, path management, and YAML parsing.

Architecture Context
--------------------
Configuration sits at the Core layer and is consumed by every other module.
The Config object is created once at startup (FastAPI lifespan or CLI command)
and passed to the components that need settings.

    User's config.yaml
           ↓
    load_config() → Config object
           ↓
    Passed to: LLM client factory, cache store factory, SimulationPipeline

Configuration Hierarchy
-----------------------
    Config
    ├── ProjectConfig      # Project name, data directory
    ├── LLMConfig          # Provider, model, API keys, task temperatures
    ├── StorageConfig      # Cache backend (sqlite, memory)
    ├── PipelineConfig     # Fallback topic, caching and narration switches
    ├── APIConfig          # API server settings
    └── LoggingConfig      # Level and optional log file

Environment Variables
---------------------
Secrets and deployment-specific values use ${VAR_NAME} syntax:

    llm:
      groq:
        api_key: ${GROQ_API_KEY}
        model: ${LOOMIN_LLM_MODEL:llama-3.3-70b-versatile}  # with default

The expand_env_vars() function recursively processes all string values.
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from loomin.core.config.base import ProjectConfig, StorageConfig
from loomin.core.config.features import APIConfig, LoggingConfig, PipelineConfig
from loomin.core.config.llm import LLMConfig, LLMProviderConfig
from loomin.core.exceptions import ConfigValidationError
from loomin.core.security.env import LLM_PROVIDERS, STORAGE_BACKENDS, TOPICS

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """Main Loomin configuration."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Runtime paths (set after loading)
    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Validates:
        - Nested config types
        - Critical path validation (data_dir not root)
        - Provider, backend, fallback topic and log level values
        """
        # JPL #5: Assertions for nested config types
        assert isinstance(self.project, ProjectConfig), "project must be ProjectConfig"
        assert isinstance(self.llm, LLMConfig), "llm must be LLMConfig"
        assert isinstance(self.storage, StorageConfig), "storage must be StorageConfig"
        assert isinstance(
            self.pipeline, PipelineConfig
        ), "pipeline must be PipelineConfig"

        if self.project.data_dir in ("/", "\\", ""):
            raise ConfigValidationError(
                f"data_dir must not be root or empty: {self.project.data_dir!r}"
            )
        if self.llm.default_provider not in LLM_PROVIDERS | {"anthropic"}:
            raise ConfigValidationError(
                f"llm.default_provider must be one of {sorted(LLM_PROVIDERS)}, "
                f"got: {self.llm.default_provider}"
            )
        if self.storage.backend not in STORAGE_BACKENDS:
            raise ConfigValidationError(
                f"storage.backend must be one of {sorted(STORAGE_BACKENDS)}, "
                f"got: {self.storage.backend}"
            )
        if self.pipeline.fallback_topic not in TOPICS:
            raise ConfigValidationError(
                f"pipeline.fallback_topic must be one of {sorted(TOPICS)}, "
                f"got: {self.pipeline.fallback_topic}"
            )
        if self.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"logging.level must be one of {sorted(VALID_LOG_LEVELS)}, "
                f"got: {self.logging.level}"
            )

    @property
    def data_path(self) -> Path:
        """Get absolute path to data directory."""
        return self._base_path / self.project.data_dir

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL of the result cache (defaults under data_dir)."""
        if self.storage.database_url:
            return self.storage.database_url
        return f"sqlite:///{self.data_path / 'simulation_cache.db'}"

    @property
    def log_path(self) -> Optional[Path]:
        """Get path to the log file, if file logging is enabled."""
        if not self.logging.file:
            return None
        path = Path(self.logging.file)
        return path if path.is_absolute() else self._base_path / path

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.data_path.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        # Import here to avoid circular dependency
        from loomin.core.config_loaders import expand_env_vars

        data = expand_env_vars(data)

        config = cls(
            project=ProjectConfig(
                **cls._filter_fields(ProjectConfig, data.get("project"))
            ),
            llm=cls._parse_llm_config(data),
            storage=StorageConfig(
                **cls._filter_fields(StorageConfig, data.get("storage"))
            ),
            pipeline=PipelineConfig(
                **cls._filter_fields(PipelineConfig, data.get("pipeline"))
            ),
            api=APIConfig(**cls._filter_fields(APIConfig, data.get("api"))),
            logging=LoggingConfig(
                **cls._filter_fields(LoggingConfig, data.get("logging"))
            ),
        )

        if base_path:
            config._base_path = base_path

        return config

    @classmethod
    def _parse_llm_config(cls, data: Dict[str, Any]) -> LLMConfig:
        """Parse LLM config with multiple provider configs.

        Provider blocks given in YAML are merged over the built-in defaults so a
        file that only sets ``api_key`` keeps the default model and URL.
        """
        llm_data = data.get("llm") or {}
        defaults = LLMConfig()
        providers: Dict[str, LLMProviderConfig] = {}
        for name in ("groq", "openai", "claude", "ollama"):
            base = asdict(getattr(defaults, name))
            base.update(cls._filter_fields(LLMProviderConfig, llm_data.get(name)))
            providers[name] = LLMProviderConfig(**base)

        return LLMConfig(
            default_provider=llm_data.get("default_provider", "groq"),
            extraction_temperature=float(
                llm_data.get("extraction_temperature", 0.1)
            ),
            explanation_temperature=float(
                llm_data.get("explanation_temperature", 0.7)
            ),
            **providers,
        )
