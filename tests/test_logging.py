"""Unit tests for diagnostic logging."""

import json
import logging
import sys

import pytest
from opentelemetry.sdk.trace import TracerProvider

from tracerboot.config import LoggingConfig
from tracerboot.logging import LoggerManager, StructuredFormatter, TextFormatter
from tracerboot.logging.structured import current_trace_context


@pytest.fixture
def tracer():
    provider = TracerProvider()
    yield provider.get_tracer("test")
    provider.shutdown()


def _record(message="Selected LOCAL_DEBUG tracing backend", **extra):
    record = logging.LogRecord(
        name="tracerboot.bootstrap",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_basic_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "tracerboot.bootstrap"
        assert entry["message"] == "Selected LOCAL_DEBUG tracing backend"
        assert "timestamp" in entry
        assert "trace_id" not in entry

    def test_trace_context_inside_span(self, tracer):
        with tracer.start_as_current_span("work") as span:
            entry = json.loads(StructuredFormatter().format(_record()))
            ctx = span.get_span_context()

        assert entry["trace_id"] == format(ctx.trace_id, "032x")
        assert entry["span_id"] == format(ctx.span_id, "016x")

    def test_trace_context_disabled(self, tracer):
        formatter = StructuredFormatter(include_trace_context=False)
        with tracer.start_as_current_span("work"):
            entry = json.loads(formatter.format(_record()))
        assert "trace_id" not in entry

    def test_record_extra_fields(self):
        entry = json.loads(StructuredFormatter().format(_record(backend="CLOUD")))

        assert entry["backend"] == "CLOUD"

    def test_exception_info(self):
        try:
            raise RuntimeError("exporter failed")
        except RuntimeError:
            record = logging.LogRecord(
                "tracerboot", logging.ERROR, __file__, 1, "failed", (), None
            )
            record.exc_info = sys.exc_info()

        entry = json.loads(StructuredFormatter().format(record))
        assert entry["exception"]["type"] == "RuntimeError"
        assert entry["exception"]["message"] == "exporter failed"


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_format(self):
        line = TextFormatter().format(_record())
        assert "INFO" in line
        assert "[tracerboot.bootstrap]" in line
        assert line.endswith("Selected LOCAL_DEBUG tracing backend")
        assert "[trace=" not in line

    def test_trace_prefix(self, tracer):
        with tracer.start_as_current_span("work") as span:
            line = TextFormatter().format(_record())
            trace_id = format(span.get_span_context().trace_id, "032x")

        assert f"[trace={trace_id[:16]}]" in line


class TestCurrentTraceContext:
    def test_no_span(self):
        assert current_trace_context() is None


class TestLoggerManager:
    """Tests for LoggerManager."""

    def test_configure_writes_to_stdout(self, capsys):
        manager = LoggerManager(LoggingConfig(level="INFO", format="text"))
        manager.configure()
        try:
            logging.getLogger("tracerboot.sampler").info("Using sampler")
        finally:
            manager.shutdown()

        assert "Using sampler" in capsys.readouterr().out

    def test_json_format(self, capsys):
        manager = LoggerManager(LoggingConfig(level="DEBUG", format="json"))
        manager.configure()
        try:
            logging.getLogger("tracerboot.backends").debug("detail")
        finally:
            manager.shutdown()

        entry = json.loads(capsys.readouterr().out.strip())
        assert entry["logger"] == "tracerboot.backends"
        assert entry["level"] == "DEBUG"

    def test_level_filters(self, capsys):
        manager = LoggerManager(LoggingConfig(level="WARNING"))
        manager.configure()
        try:
            logging.getLogger("tracerboot").info("hidden")
        finally:
            manager.shutdown()

        assert "hidden" not in capsys.readouterr().out

    def test_configure_idempotent(self):
        manager = LoggerManager(LoggingConfig())
        manager.configure()
        manager.configure()
        try:
            handlers = logging.getLogger("tracerboot").handlers
            assert len(handlers) == 1
        finally:
            manager.shutdown()

    def test_shutdown_restores_logger(self):
        manager = LoggerManager(LoggingConfig())
        manager.configure()
        manager.shutdown()

        root = logging.getLogger("tracerboot")
        assert root.handlers == []
        assert root.propagate is True
        assert manager.is_configured is False

    def test_invalid_config_rejected(self):
        manager = LoggerManager(LoggingConfig(format="xml"))
        with pytest.raises(ValueError):
            manager.configure()
        assert manager.is_configured is False

    def test_output_file(self, tmp_path):
        log_file = tmp_path / "tracerboot.log"
        manager = LoggerManager(LoggingConfig(output_file=str(log_file)))
        manager.configure()
        try:
            logging.getLogger("tracerboot").warning("to file")
        finally:
            manager.shutdown()

        assert "to file" in log_file.read_text()
