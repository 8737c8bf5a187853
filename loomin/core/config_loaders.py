"""
Configuration Loading and Management Functions.

Handles loading, saving, and applying environment overrides to Loomin
configuration.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

Environment Variables
---------------------
    GROQ_API_KEY, OPENAI_API_KEY, ANTHROPIC_API_KEY   provider secrets
    LOOMIN_LLM_PROVIDER       groq | openai | claude | ollama
    LOOMIN_LLM_MODEL          model for the active provider
    LOOMIN_LLM_TEMPERATURE    temperature for the active provider (0.0-2.0)
    LOOMIN_STORAGE_BACKEND    sqlite | memory
    LOOMIN_DATABASE_URL       SQLAlchemy URL of the result cache
    LOOMIN_FALLBACK_TOPIC     topic reported when LLM extraction fails
    LOOMIN_EXPLAIN_FAILURES   ask the LLM to narrate failures (bool)
    LOOMIN_API_HOST, LOOMIN_API_PORT, LOOMIN_CORS_ORIGINS
    LOOMIN_LOG_LEVEL          DEBUG | INFO | WARNING | ERROR | CRITICAL
"""

import os
import re
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

import yaml

from loomin.core.exceptions import ConfigValidationError
from loomin.core.security.env import (
    LLM_PROVIDERS,
    STORAGE_BACKENDS,
    TOPICS,
    get_env_bool,
    get_env_float,
    get_env_int,
    get_env_whitelist,
)

if TYPE_CHECKING:
    from loomin.core.config import Config

CONFIG_FILENAMES = ("config.yaml", "loomin.yaml")

LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


class _Logger:
    """Lazy logger holder.

    Rule #6: Encapsulates logger state in smallest scope.
    Avoids slow startup from rich library import.
    """

    _instance = None

    @classmethod
    def get(cls) -> Any:
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from loomin.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles nested structures including:
    - Strings with ${VAR_NAME} or ${VAR_NAME:default} syntax
    - Nested dictionaries
    - Nested lists (including lists of dicts, lists of lists)

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        # Match ${VAR_NAME} or ${VAR_NAME:default} pattern
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    # Return primitives (int, float, bool, None) unchanged
    return value


def _apply_env_overrides(config: "Config") -> "Config":
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values.
    This allows deployments to override config without modifying files.
    """
    _apply_api_key_overrides(config)
    _apply_llm_config_overrides(config)
    _apply_storage_overrides(config)
    _apply_pipeline_overrides(config)
    _apply_api_server_overrides(config)
    _apply_logging_overrides(config)
    return config


def _apply_api_key_overrides(config: "Config") -> None:
    """Apply LLM API key overrides from environment."""
    groq_key = os.environ.get("GROQ_API_KEY")
    if groq_key:
        config.llm.groq.api_key = groq_key

    openai_key = os.environ.get("OPENAI_API_KEY")
    if openai_key:
        config.llm.openai.api_key = openai_key

    anthropic_key = os.environ.get("ANTHROPIC_API_KEY")
    if anthropic_key:
        config.llm.claude.api_key = anthropic_key


def _apply_llm_config_overrides(config: "Config") -> None:
    """Apply LLM provider, model, and temperature overrides.

    Security:
        Uses get_env_whitelist to validate provider values.
        Uses get_env_float with bounds for temperature.
    """
    llm_provider = get_env_whitelist("LOOMIN_LLM_PROVIDER", LLM_PROVIDERS)
    if llm_provider:
        config.llm.default_provider = llm_provider

    # Allow common model name patterns (alphanumeric, dash, underscore, dot, colon, slash)
    llm_model = os.environ.get("LOOMIN_LLM_MODEL")
    if llm_model and re.match(r"^[a-zA-Z0-9._:\-/]+$", llm_model):
        config.llm.provider_config().model = llm_model

    llm_temp = get_env_float(
        "LOOMIN_LLM_TEMPERATURE",
        min_value=0.0,
        max_value=2.0,
    )
    if llm_temp is not None:
        config.llm.provider_config().temperature = llm_temp


def _apply_storage_overrides(config: "Config") -> None:
    """Apply result cache storage overrides.

    Security:
        Uses get_env_whitelist to validate storage backend values.
    """
    storage_backend = get_env_whitelist("LOOMIN_STORAGE_BACKEND", STORAGE_BACKENDS)
    if storage_backend:
        config.storage.backend = storage_backend

    database_url = os.environ.get("LOOMIN_DATABASE_URL")
    if database_url:
        config.storage.database_url = database_url


def _apply_pipeline_overrides(config: "Config") -> None:
    """Apply simulation pipeline overrides."""
    fallback_topic = get_env_whitelist(
        "LOOMIN_FALLBACK_TOPIC", TOPICS, case_sensitive=True
    )
    if fallback_topic:
        config.pipeline.fallback_topic = fallback_topic

    config.pipeline.explain_failures = get_env_bool(
        "LOOMIN_EXPLAIN_FAILURES", default=config.pipeline.explain_failures
    )


def _validate_cors_origin(origin: str) -> Optional[str]:
    """Validate a single CORS origin.

    Rule #1: Extracted to reduce nesting in _apply_api_server_overrides.

    Args:
        origin: Origin string to validate

    Returns:
        Validated origin or None if invalid
    """
    origin = origin.strip()

    if origin == "*":
        return origin

    if not origin.startswith(("http://", "https://")):
        return None

    if re.match(r"^https?://[a-zA-Z0-9.\-:]+$", origin):
        return origin

    return None


def _apply_api_server_overrides(config: "Config") -> None:
    """Apply API server configuration overrides.

    Security:
        Uses get_env_int with port bounds (1-65535).
        Validates CORS origins for valid URL format.
    """
    api_host = os.environ.get("LOOMIN_API_HOST")
    if api_host and re.match(r"^[a-zA-Z0-9.\-]+$", api_host):
        config.api.host = api_host

    api_port = get_env_int(
        "LOOMIN_API_PORT",
        min_value=1,
        max_value=65535,
    )
    if api_port is not None:
        config.api.port = api_port

    cors_origins = os.environ.get("LOOMIN_CORS_ORIGINS")
    if not cors_origins:
        return

    validated = [_validate_cors_origin(o) for o in cors_origins.split(",")]
    validated = [o for o in validated if o is not None]

    if validated:
        config.api.cors_origins = validated


def _apply_logging_overrides(config: "Config") -> None:
    """Apply log level override."""
    level = get_env_whitelist("LOOMIN_LOG_LEVEL", LOG_LEVELS)
    if level:
        config.logging.level = level


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config.yaml (or
            loomin.yaml) in base_path.
        base_path: Base path for the project. Defaults to current directory.

    Returns:
        Config object with all settings.

    Raises:
        ConfigValidationError: If the file holds an invalid value.
    """
    # Lazy import to avoid circular dependency
    from loomin.core.config import Config

    base_path = base_path or Path.cwd()

    if config_path is None:
        for filename in CONFIG_FILENAMES:
            candidate = base_path / filename
            if candidate.exists():
                config_path = candidate
                break
        else:
            return _create_default_config(base_path)
    if not config_path.exists():
        return _create_default_config(base_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        _Logger.get().warning(
            "Could not read config, using defaults",
            path=str(config_path),
            error=str(e),
        )
        return _create_default_config(base_path)

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a YAML mapping")

    config = Config.from_dict(data, base_path)
    return _apply_env_overrides(config)


def _create_default_config(base_path: Path) -> "Config":
    """Create default configuration with environment overrides."""
    from loomin.core.config import Config

    config = Config()
    config._base_path = base_path
    return _apply_env_overrides(config)


def save_config(config: "Config", config_path: Optional[Path] = None) -> None:
    """Save configuration to YAML file."""
    if config_path is None:
        config_path = config._base_path / "config.yaml"

    config_dict = config.to_dict()

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
