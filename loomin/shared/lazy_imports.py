"""
Lazy-loading helpers.

LLM SDK clients are heavy to construct and need credentials that may be
absent in offline use (direct-path evaluation, cache maintenance). They are
built on first access instead of at client construction:

    class ClaudeClient:
        @lazy_property
        def client(self):
            from anthropic import AsyncAnthropic
            return AsyncAnthropic(api_key=self.api_key)
"""

from functools import wraps
from typing import Any, Callable, cast


def lazy_property(import_func: Callable[..., Any]) -> Any:
    """Decorator for lazy-loaded properties.

    The decorated function runs once per instance; its result is cached on the
    instance and returned on subsequent accesses.

    Args:
        import_func: Function that imports and returns the dependency

    Returns:
        A property that lazy-loads the dependency

    Examples:
        >>> class MyService:
        ...     @lazy_property
        ...     def client(self):
        ...         return object()
        ...
        >>> service = MyService()
        >>> service.client is service.client
        True
    """
    attr_name = f"_{import_func.__name__}_cached"

    @wraps(import_func)
    def wrapper(self: Any) -> Any:
        if not hasattr(self, attr_name):
            setattr(self, attr_name, import_func(self))
        return getattr(self, attr_name)

    return cast(Any, property(wrapper))
