"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from rich.logging import RichHandler

from querycache.config.models import LoggingSettings
from querycache.shared.errors import DatabaseError, ErrorContext
from querycache.shared.logging import (
    StructuredFormatter,
    configure_logging,
    log_operation_error,
    log_operation_success,
    setup_structured_logger,
)


class TestStructuredFormatter:
    def test_formats_json_with_extras(self) -> None:
        record = logging.LogRecord("querycache.test", logging.ERROR, __file__, 1, "failed %s", ("x",), None)
        record.operation = "query"
        record.error_code = "DATABASE_ERROR"

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["message"] == "failed x"
        assert entry["level"] == "ERROR"
        assert entry["operation"] == "query"
        assert entry["error_code"] == "DATABASE_ERROR"


class TestSetupStructuredLogger:
    def test_rich_console_handler(self) -> None:
        logger = setup_structured_logger("querycache.test.rich", "DEBUG")

        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.propagate is False

    def test_file_output_is_json(self, tmp_path: Path) -> None:
        log_file = tmp_path / "app.log"
        logger = setup_structured_logger("querycache.test.file", "INFO", str(log_file), use_rich_console=False)

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])["message"] == "hello"
        for handler in logger.handlers:
            handler.close()

    def test_reconfiguration_replaces_handlers(self) -> None:
        setup_structured_logger("querycache.test.reconfig")
        logger = setup_structured_logger("querycache.test.reconfig")

        assert len(logger.handlers) == 1

    def test_configure_from_settings(self) -> None:
        logger = configure_logging(LoggingSettings(level="warning", use_rich_console=False), "querycache.test.settings")

        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0], RichHandler)

    def test_configure_passes_settings_through(self, mocker) -> None:
        setup = mocker.patch("querycache.shared.logging.setup_structured_logger")
        settings = LoggingSettings(level="debug", file="logs/app.log")

        result = configure_logging(settings)

        setup.assert_called_once_with(
            name="querycache",
            level="DEBUG",
            log_file="logs/app.log",
            use_rich_console=True,
        )
        assert result is setup.return_value


class TestOperationLogging:
    def test_error_log_carries_code_and_masked_context(self, caplog) -> None:
        logger = logging.getLogger("querycache.test.ops")
        error = DatabaseError(
            "locked",
            context=ErrorContext(operation="execute", additional_data={"bound_values": "x", "attempt": 1}),
        )

        with caplog.at_level(logging.ERROR, logger="querycache.test.ops"):
            log_operation_error(logger, error)

        record = caplog.records[-1]
        assert record.error_code == "DATABASE_ERROR"
        assert record.operation == "execute"
        assert record.context["additional_data"] == {"attempt": 1}

    def test_success_log(self, caplog) -> None:
        logger = logging.getLogger("querycache.test.ops")

        with caplog.at_level(logging.DEBUG, logger="querycache.test.ops"):
            log_operation_success(logger, "query", 1.5, {"affected": 1})

        record = caplog.records[-1]
        assert record.duration_ms == 1.5
        assert record.result_info == {"affected": 1}
