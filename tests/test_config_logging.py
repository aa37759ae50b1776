"""Tests for settings and structured logging."""

import logging

import structlog

from vetted import __version__, configure_logging, get_settings, string
from vetted.logging import LoggerRegistry, _add_library_info, _truncate_values, input_logger, validation_logger


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.MAX_LAZY_DEPTH == 64
        assert settings.RECEIVED_MAX_STRING == 100
        assert settings.RECEIVED_MAX_ITEMS == 5
        assert settings.LOG_JSON is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("VETTED_MAX_LAZY_DEPTH", "8")
        monkeypatch.setenv("VETTED_LOG_JSON", "true")
        settings = get_settings()
        assert settings.MAX_LAZY_DEPTH == 8
        assert settings.LOG_JSON is True

    def test_cached(self):
        assert get_settings() is get_settings()


class TestProcessors:
    def test_library_info(self):
        event = _add_library_info(None, "info", {"event": "x"})
        assert event["library"] == "vetted"
        assert event["version"] == __version__

    def test_truncate_values(self):
        event = _truncate_values(None, "info", {"event": "e" * 300, "input": "x" * 300})
        assert len(event["event"]) == 300
        assert event["input"].endswith("...") and len(event["input"]) == 200


class TestLoggers:
    def test_registry_reuses_loggers(self):
        assert validation_logger() is LoggerRegistry.get("validation")
        assert input_logger() is not validation_logger()

    def test_parse_failure_emits_debug_event(self, captured_logs):
        string().min(3).parse_result("a")
        event = next(e for e in captured_logs if e["event"] == "parse_failed")
        assert event["log_level"] == "debug"
        assert event["issue_count"] == 1
        assert event["schema"] == "StringSchema"


class TestConfigureLogging:
    def test_sets_up_vetted_logger(self):
        try:
            configure_logging("DEBUG", json_logs=True)
            vetted_logger = logging.getLogger("vetted")
            assert vetted_logger.level == logging.DEBUG
            assert len(vetted_logger.handlers) == 1
            assert vetted_logger.propagate is False
        finally:
            structlog.reset_defaults()
            logging.getLogger("vetted").handlers = []
            logging.getLogger("vetted").propagate = True
