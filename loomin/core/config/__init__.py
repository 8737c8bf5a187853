"""
Configuration Management for Loomin.

This module provides the application's configuration system using a hierarchy
of dataclasses that map to YAML configuration files. It supports environment
variable expansion for secrets and deployment-specific values.

Public API
----------
    from loomin.core.config import Config, LLMConfig

Architecture
------------
Configuration is organized into domain-specific modules:

    config/
    ├── base.py          # ProjectConfig, StorageConfig
    ├── llm.py           # LLMConfig, LLMProviderConfig
    ├── features.py      # PipelineConfig, APIConfig, LoggingConfig
    └── config.py        # Main Config class
"""

# Main Config class
from loomin.core.config.config import Config

# Base configs
from loomin.core.config.base import ProjectConfig, StorageConfig

# LLM configs
from loomin.core.config.llm import GROQ_BASE_URL, LLMConfig, LLMProviderConfig

# Feature configs
from loomin.core.config.features import APIConfig, LoggingConfig, PipelineConfig

__all__ = [
    # Main config
    "Config",
    # Base configs
    "ProjectConfig",
    "StorageConfig",
    # LLM
    "GROQ_BASE_URL",
    "LLMConfig",
    "LLMProviderConfig",
    # Features
    "APIConfig",
    "LoggingConfig",
    "PipelineConfig",
]

# NOTE: Loading functions (load_config, save_config, expand_env_vars) live in
# config_loaders to avoid circular imports:
#
#   from loomin.core.config_loaders import load_config
