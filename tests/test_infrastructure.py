"""
Tests for the ambient layers: exceptions, logging, and configuration.
"""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.infrastructure.config import (
    ApplicationConfig,
    FeedbackConfig,
    LoggingConfig,
    get_settings,
    load_settings_from_file,
    override_settings,
    reset_settings,
)
from app.infrastructure.exceptions import (
    CheckInAppError,
    CheckInStateError,
    ConfigurationError,
    ExportError,
    FeedbackStoreError,
    MultipleValidationError,
    TokenDecodeError,
    ValidationError,
    create_user_friendly_error_message,
    log_error_details,
)
from app.infrastructure.logging import (
    LogContext,
    StructuredFormatter,
    configure_logging_from_settings,
    configure_test_logging,
    context_filter,
    get_logger,
    log_operation,
)
from app.web.main import create_application


class TestErrorHandling:
    """Custom exception hierarchy and user-facing messages."""

    def test_validation_error_message(self):
        error = ValidationError("answer", "must be between 1 and 5", 9)
        assert error.field == "answer"
        assert error.value == 9
        assert error.user_message == "Invalid answer: must be between 1 and 5"
        assert isinstance(error, CheckInAppError)

    def test_multiple_validation_errors(self):
        error = MultipleValidationError(
            [ValidationError("a", "bad"), ValidationError("b", "worse")]
        )
        assert len(error.details["errors"]) == 2
        assert error.user_message == "Please correct the following errors and try again."

    def test_state_error(self):
        error = CheckInStateError("go back", "welcome")
        assert "welcome" in str(error)
        assert error.details == {"action": "go back", "stage": "welcome"}

    def test_token_error_hides_token(self):
        error = TokenDecodeError("secret-ish")
        assert error.details == {"token_length": 10}
        assert "partner link" in error.user_message

    def test_store_and_export_errors(self):
        assert FeedbackStoreError("disk full", "append").operation == "append"
        assert ExportError("boom", "xlsx").export_format == "xlsx"

    def test_user_friendly_messages(self):
        assert create_user_friendly_error_message(TokenDecodeError()) == TokenDecodeError().user_message
        assert "Invalid input" in create_user_friendly_error_message(ValueError("x"))
        assert "unexpected" in create_user_friendly_error_message(RuntimeError("x"))

    def test_log_error_details(self):
        details = log_error_details(FeedbackStoreError("x", "append"), {"path": "f.json"})
        assert details["error_type"] == "FeedbackStoreError"
        assert details["context"] == {"path": "f.json"}
        assert details["error_details"] == {"operation": "append"}


class TestLogging:
    """Structured logging helpers."""

    def test_get_logger_is_namespaced(self):
        assert get_logger("feedback").name == "app.feedback"
        assert get_logger("app.web").name == "app.web"

    def test_structured_formatter_outputs_json(self):
        record = logging.LogRecord("app.test", logging.INFO, __file__, 10, "hello %s", ("there",), None)
        record.feedback_id = "f-1"
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["message"] == "hello there"
        assert entry["level"] == "INFO"
        assert entry["feedback_id"] == "f-1"

    def test_log_context_restores_previous_values(self):
        with LogContext(operation="outer"):
            with LogContext(operation="inner", feedback_id="x"):
                assert context_filter.context["operation"] == "inner"
            assert context_filter.context["operation"] == "outer"
            assert "feedback_id" not in context_filter.context
        assert "operation" not in context_filter.context

    def test_log_operation_reraises(self):
        @log_operation("explode")
        def explode():
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            explode()
        assert "operation" not in context_filter.context


class TestConfiguration:
    """Settings sections and overrides."""

    @pytest.fixture(autouse=True)
    def _fresh_settings(self, monkeypatch):
        for key in ("APP_ENVIRONMENT", "APP_DEBUG", "APP_TITLE", "FEEDBACK_DATA_FILE", "APP_PUBLIC_BASE_URL", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)
        reset_settings()
        yield
        reset_settings()

    def test_feedback_config_adds_json_suffix(self, tmp_path):
        cfg = FeedbackConfig(data_file=str(tmp_path / "store" / "feedback"))
        assert cfg.get_data_path().suffix == ".json"
        assert (tmp_path / "store").is_dir()

    def test_debug_not_allowed_in_production(self):
        with pytest.raises(PydanticValidationError):
            ApplicationConfig(environment="production", debug=True)

    def test_public_base_url_must_be_http(self):
        with pytest.raises(PydanticValidationError):
            ApplicationConfig(public_base_url="ftp://example.test")
        assert ApplicationConfig(public_base_url="  ").public_base_url is None

    def test_override_settings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("APP_TITLE", "placeholder")
        # registered so teardown removes what override_settings writes
        monkeypatch.setenv("APP_ENVIRONMENT", "development")
        monkeypatch.setenv("FEEDBACK_DATA_FILE", str(tmp_path / "unused.json"))
        settings = override_settings(
            app_environment="testing",
            feedback_data_file=str(tmp_path / "fb.json"),
        )
        assert settings.is_testing()
        assert settings.feedback.get_data_path() == Path(tmp_path / "fb.json")
        assert settings.app.title == "placeholder"

    def test_production_logging_level(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "production")
        reset_settings()
        assert get_settings().logging.level == "WARNING"

    def test_environment_info(self):
        info = get_settings().get_environment_info()
        assert set(info["features"]) == {"partner_compare", "feedback", "feedback_export"}

    def test_load_settings_from_file(self, monkeypatch, tmp_path):
        config_file = tmp_path / "settings.json"
        log_file = tmp_path / "logs" / "checkin.log"
        config_file.write_text(
            json.dumps(
                {
                    "app": {"title": "From File"},
                    "logging": {"file_path": str(log_file), "level": "ERROR"},
                    "security": {"max_token_length": 256},
                }
            ),
            encoding="utf-8",
        )
        # registered so teardown removes what the loader writes
        monkeypatch.setenv("APP_TITLE", "placeholder")
        monkeypatch.setenv("LOG_FILE_PATH", "")
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        monkeypatch.setenv("SECURITY_MAX_TOKEN_LENGTH", "512")

        settings = load_settings_from_file(str(config_file))

        assert settings.app.title == "From File"
        assert settings.logging.file_path == str(log_file)
        assert settings.logging.level == "ERROR"
        assert settings.security.max_token_length == 256

    def test_load_settings_rejects_other_formats(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("app: {}", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings_from_file(str(config_file))

    def test_invalid_settings_fail_application_startup(self, monkeypatch):
        monkeypatch.setenv("APP_PUBLIC_BASE_URL", "not-a-url")
        reset_settings()
        with pytest.raises(ConfigurationError):
            create_application()

    def test_log_level_env_wins_over_environment_default(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        reset_settings()
        assert get_settings().logging.level == "ERROR"


class TestLoggingFromSettings:
    """LOG_* settings drive the handler setup."""

    def test_file_handler_follows_settings(self, tmp_path):
        log_file = tmp_path / "app.log"
        config = LoggingConfig(
            level="WARNING",
            file_path=str(log_file),
            max_bytes=2048,
            backup_count=2,
            structured=True,
            console_enabled=False,
        )
        try:
            configure_logging_from_settings(config)
            app_logger = logging.getLogger("app")
            assert app_logger.level == logging.WARNING
            file_handlers = [h for h in app_logger.handlers if isinstance(h, RotatingFileHandler)]
            assert len(file_handlers) == 1
            assert file_handlers[0].maxBytes == 2048
            assert file_handlers[0].backupCount == 2
            assert not any(type(h) is logging.StreamHandler for h in app_logger.handlers)

            get_logger("feedback").warning("disk nearly full")
            file_handlers[0].flush()
            entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
            assert entry["message"] == "disk nearly full"
            assert entry["logger"] == "app.feedback"
        finally:
            configure_test_logging()

    def test_no_file_handler_without_path(self):
        try:
            configure_logging_from_settings(LoggingConfig(file_path="", console_enabled=True))
            handlers = logging.getLogger("app").handlers
            assert not any(isinstance(h, RotatingFileHandler) for h in handlers)
            assert any(isinstance(h, logging.StreamHandler) for h in handlers)
        finally:
            configure_test_logging()
