"""Input hardening helpers for configuration loading."""

from loomin.core.security.env import (
    STORAGE_BACKENDS,
    LLM_PROVIDERS,
    TOPICS,
    get_env_bool,
    get_env_float,
    get_env_int,
    get_env_whitelist,
)

__all__ = [
    "STORAGE_BACKENDS",
    "LLM_PROVIDERS",
    "TOPICS",
    "get_env_bool",
    "get_env_float",
    "get_env_int",
    "get_env_whitelist",
]
