"""
Structured Logging for Loomin.

This module provides a logging infrastructure that supports context binding,
a stage-aware logger for the simulation pipeline, and consistent formatting
across the service.

Architecture Context
--------------------
Logging is a Core layer service used by every module in the system. All modules
should import get_logger() from here rather than using Python's logging directly:

    # Good - uses Loomin's structured logging
    from loomin.core.logging import get_logger
    logger = get_logger(__name__)

    # Avoid - bypasses our structure
    import logging
    logger = logging.getLogger(__name__)

Logger Types
------------
**StructuredLogger**
    Base logger with context binding support. Key-value pairs passed as keyword
    arguments (or bound once) are appended to the message:

        logger = get_logger(__name__)
        logger.bind(request_id="r-42")
        logger.info("Cache miss", key_length=118)

**PipelineLogger**
    Specialized for one pipeline invocation. Tracks stages (direct, cache, llm,
    evaluate, explain, cache_write) with timing:

        plog = PipelineLogger(request_id)
        plog.start_stage("direct")
        plog.finish(success=True, source="direct")

Module-Level Factory
--------------------
Loggers are cached by name, so multiple calls to get_logger() return the same
instance.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.logging import RichHandler


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger with context support.

    Provides consistent logging across the application with
    support for structured fields and context tracking.
    """

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or _ConfigHolder.get_config()
        self._context: dict[str, Any] = {}
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # Remove existing handlers
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            self.config.format,
            datefmt=self.config.date_format,
        )

        if self.config.console:
            console_handler = RichHandler(
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Attach fields that appear in every subsequent message."""
        self._context.update(kwargs)
        return self

    def unbind(self, *keys: str) -> None:
        """Remove previously bound fields."""
        for key in keys:
            self._context.pop(key, None)

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with context and extra fields."""
        fields = {**self._context, **kwargs}
        if fields:
            field_str = " | ".join(f"{k}={v}" for k, v in fields.items())
            return f"{message} | {field_str}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message, **kwargs))


# Module-level logger factory
_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration.

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config)
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Already-created loggers are reconfigured so a late call (e.g. from the CLI
    callback) still takes effect.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(
        level=level,
        file_path=log_file,
        console=console,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _ConfigHolder.set_config(config)

    for structured in _loggers.values():
        structured.config = config
        structured._setup_logger()


class _ConfigHolder:
    """Holds default logging configuration."""

    _config: LogConfig = LogConfig()

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


class PipelineLogger:
    """
    Specialized logger for one simulation pipeline invocation.

    Tracks processing stages and provides timing information.
    """

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        self.logger = get_logger("loomin.pipeline")
        self._stage_start: Optional[datetime] = None
        self._current_stage: Optional[str] = None
        self._started = datetime.now()

    @property
    def current_stage(self) -> Optional[str]:
        return self._current_stage

    def start_stage(self, stage: str) -> None:
        """Mark the start of a processing stage."""
        self._finish_current_stage()
        self._current_stage = stage
        self._stage_start = datetime.now()
        self.logger.debug(
            "Starting stage",
            request_id=self.request_id,
            stage=stage,
        )

    def _finish_current_stage(self) -> None:
        """Log completion of current stage if any."""
        if self._current_stage and self._stage_start:
            duration = (datetime.now() - self._stage_start).total_seconds()
            self.logger.debug(
                "Completed stage",
                request_id=self.request_id,
                stage=self._current_stage,
                duration_ms=f"{duration * 1000:.1f}",
            )

    def finish(
        self,
        success: bool,
        source: Optional[str] = None,
        status: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """Mark pipeline completion."""
        self._finish_current_stage()
        total = (datetime.now() - self._started).total_seconds()
        if success:
            self.logger.info(
                "Simulation evaluated",
                request_id=self.request_id,
                source=source,
                status=status,
                duration_ms=f"{total * 1000:.1f}",
            )
        else:
            self.logger.error(
                "Simulation pipeline failed",
                request_id=self.request_id,
                stage=self._current_stage,
                error=error,
            )
        self._current_stage = None
        self._stage_start = None

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log progress within a stage."""
        self.logger.debug(
            message,
            request_id=self.request_id,
            stage=self._current_stage,
            **kwargs,
        )
