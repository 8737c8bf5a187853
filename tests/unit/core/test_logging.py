"""
Tests for Structured Logging.

Organization
------------
- TestStructuredLogger: field formatting and context binding
- TestGetLogger: get_logger factory function
- TestConfigureLogging: late reconfiguration
- TestPipelineLogger: stage tracking
"""

import logging
from pathlib import Path

from loomin.core.logging import (
    LogConfig,
    PipelineLogger,
    StructuredLogger,
    configure_logging,
    get_logger,
)


class TestStructuredLogger:
    def test_fields_appended_to_message(self, caplog):
        logger = StructuredLogger("loomin.test.fields")

        with caplog.at_level(logging.INFO):
            logger.info("Cache miss", key_length=118)

        assert "Cache miss | key_length=118" in caplog.text

    def test_bound_context(self, caplog):
        logger = StructuredLogger("loomin.test.bind")
        logger.bind(request_id="r-42")

        with caplog.at_level(logging.WARNING):
            logger.warning("Slow provider", provider="groq")

        assert "request_id=r-42" in caplog.text
        assert "provider=groq" in caplog.text

    def test_unbind(self):
        logger = StructuredLogger("loomin.test.unbind").bind(a=1, b=2)
        logger.unbind("a")

        assert logger._format_message("msg") == "msg | b=2"

    def test_file_handler(self, temp_dir: Path):
        log_file = temp_dir / "logs" / "loomin.log"
        logger = StructuredLogger(
            "loomin.test.file", LogConfig(file_path=log_file, console=False)
        )

        logger.error("Disk write", path="/tmp/x")
        for handler in logger.logger.handlers:
            handler.flush()

        assert "Disk write | path=/tmp/x" in log_file.read_text()


class TestGetLogger:
    def test_caches_loggers(self):
        assert get_logger("loomin.test.cached") is get_logger("loomin.test.cached")

    def test_different_names(self):
        assert get_logger("loomin.test.one") is not get_logger("loomin.test.two")


class TestConfigureLogging:
    def test_reconfigures_existing_loggers(self):
        logger = get_logger("loomin.test.reconfigure")

        configure_logging(level="WARNING")
        try:
            assert logger.logger.level == logging.WARNING
        finally:
            configure_logging(level="INFO")

        assert logger.logger.level == logging.INFO


class TestPipelineLogger:
    def test_stage_tracking(self):
        plog = PipelineLogger("req-1")

        assert plog.current_stage is None
        plog.start_stage("direct")
        assert plog.current_stage == "direct"
        plog.start_stage("cache")
        assert plog.current_stage == "cache"

    def test_finish_success(self, caplog):
        plog = PipelineLogger("req-2")
        plog.start_stage("llm")

        with caplog.at_level(logging.INFO):
            plog.finish(success=True, source="llm", status="OPTIMAL")

        assert "Simulation evaluated" in caplog.text
        assert "request_id=req-2" in caplog.text
        assert plog.current_stage is None

    def test_finish_failure_names_stage(self, caplog):
        plog = PipelineLogger("req-3")
        plog.start_stage("evaluate")

        with caplog.at_level(logging.ERROR):
            plog.finish(success=False, error="boom")

        assert "stage=evaluate" in caplog.text
        assert "error=boom" in caplog.text
