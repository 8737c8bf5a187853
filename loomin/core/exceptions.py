"""
Centralized Exception Hierarchy for Loomin.

All custom exceptions inherit from LoominError for easy catching. Each one
carries a short error code plus "why" and "how to fix" guidance so the CLI and
API can render helpful messages without leaking internals.

Exception Hierarchy
-------------------
    LoominError (base)
    ├── ValidationError
    │   ├── InvalidNotesError
    │   └── ConfigValidationError
    ├── ProcessingError
    ├── LLMError
    │   ├── RateLimitError
    │   ├── ConfigurationError
    │   └── ResponseParseError
    └── StorageError
        └── CacheStoreError

Recovery policy
---------------
LLMError and StorageError are recovered at the component boundary that raised
them (the extraction adapter, the explainer, the result cache). ValidationError
and ProcessingError reach the caller, which reports a generic processing failure.
"""

import re
from typing import List, Optional


def sanitize_message(message: str) -> str:
    """Sanitize an error message to avoid leaking sensitive info.

    Masks API keys, bearer tokens and credentials embedded in URLs.

    Args:
        message: Original error message

    Returns:
        Sanitized message with sensitive info replaced
    """
    if not message:
        return message

    patterns = [
        # API keys (OpenAI "sk-", Groq "gsk_", Anthropic "sk-ant-")
        (r"(sk-|gsk_|api_key[=:][\s]*)[a-zA-Z0-9_-]{20,}", r"\1<api-key>"),
        (
            r"(GROQ_API_KEY|ANTHROPIC_API_KEY|OPENAI_API_KEY|API_KEY)[=:]\s*[^\s]+",
            r"\1=<hidden>",
        ),
        (r"Bearer\s+[a-zA-Z0-9_.-]+", r"Bearer <token>"),
        (r"://[^:/@\s]+:[^@\s]+@", r"://<user>:<pass>@"),
    ]

    result = message
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result)
    return result


class LoominError(Exception):
    """
    Base exception for all Loomin errors.

    Attributes:
        error_code: Unique code for documentation lookup (e.g., "LM-LLM-001")
        why_it_happened: Explanation of the root cause
        how_to_fix: List of actionable suggestions
    """

    error_code: str = "LM-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(sanitize_message(message))

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(LoominError):
    """Base exception for rejected input."""

    error_code = "LM-VAL-000"
    why_it_happened = "The input did not have the expected shape"
    how_to_fix = ["Check the request body against the API documentation"]


class InvalidNotesError(ValidationError):
    """Raised when the note text is missing or is not a string."""

    error_code = "LM-VAL-001"
    why_it_happened = "The 'notes' field must be a string"
    how_to_fix = ['Send a JSON body of the form {"notes": "..."}']


class ConfigValidationError(ValidationError):
    """Raised when a configuration value is out of range or unknown."""

    error_code = "LM-VAL-002"
    why_it_happened = "A configuration value is invalid"
    how_to_fix = [
        "Check config.yaml for typos",
        "Remove the offending key to fall back to the default",
    ]


# ============================================================================
# Processing Exceptions
# ============================================================================


class ProcessingError(LoominError):
    """Raised when the simulation pipeline cannot produce a result."""

    error_code = "LM-PROC-000"
    why_it_happened = "The simulation pipeline failed"
    how_to_fix = ["Retry the request", "Check the server logs for the stage that failed"]


# ============================================================================
# LLM Exceptions
# ============================================================================


class LLMError(LoominError):
    """
    Base exception for LLM-related errors.

    Raised when a completion call to Groq, OpenAI, Anthropic or a local
    Ollama server fails.
    """

    error_code = "LM-LLM-000"
    why_it_happened = "An LLM operation failed"
    how_to_fix = [
        "Check your API key is set correctly",
        "Verify your internet connection",
        "Try a different LLM provider",
    ]


class RateLimitError(LLMError):
    """
    Raised when an LLM API rate limit is exceeded.

    Attributes
    ----------
    retry_after : float, optional
        Seconds to wait before retrying (if provided by API)
    """

    error_code = "LM-LLM-001"
    why_it_happened = "The LLM API rate limit was exceeded"
    how_to_fix = [
        "Wait a few minutes before retrying",
        "Use a local Ollama model for unlimited requests",
    ]

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.retry_after = retry_after


class ConfigurationError(LLMError):
    """
    Raised when LLM configuration is invalid.

    This can occur when:
    - API key is missing or invalid
    - Provider name is not recognized
    """

    error_code = "LM-LLM-002"
    why_it_happened = "The LLM configuration is invalid or the API key is missing"
    how_to_fix = [
        "Set your API key: export GROQ_API_KEY=your-key",
        "Or choose another provider: export LOOMIN_LLM_PROVIDER=ollama",
    ]


class ResponseParseError(LLMError):
    """Raised when a completion is not the JSON document that was requested."""

    error_code = "LM-LLM-003"
    why_it_happened = "The model returned text that is not a JSON object"
    how_to_fix = [
        "Use a model that supports JSON response format",
        "Lower the extraction temperature",
    ]


# ============================================================================
# Storage Exceptions
# ============================================================================


class StorageError(LoominError):
    """Base exception for persistence errors."""

    error_code = "LM-STOR-000"
    why_it_happened = "A storage operation failed"
    how_to_fix = ["Check the database URL and file permissions"]


class CacheStoreError(StorageError):
    """Raised when the simulation cache store cannot be read or written."""

    error_code = "LM-STOR-001"
    why_it_happened = "The simulation result cache is unavailable"
    how_to_fix = [
        "Check storage.database_url in config.yaml",
        "Switch to the in-memory cache: export LOOMIN_STORAGE_BACKEND=memory",
    ]
