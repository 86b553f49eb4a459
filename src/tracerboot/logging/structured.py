"""Log formatters with trace context.

This module provides JSON and text formatters that correlate log entries
with the current OpenTelemetry span.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID


def current_trace_context() -> Optional[Dict[str, str]]:
    """Get trace and span IDs of the current span as hex strings.

    Returns:
        Dictionary with trace_id and span_id, or None if no span is active.
    """
    ctx = trace.get_current_span().get_span_context()
    if ctx.trace_id == INVALID_TRACE_ID or ctx.span_id == INVALID_SPAN_ID:
        return None
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }


class StructuredFormatter(logging.Formatter):
    """JSON log formatter with trace context.

    Example output:
        {
            "timestamp": "2024-01-15T10:30:45.123456+00:00",
            "level": "INFO",
            "logger": "tracerboot.bootstrap",
            "message": "Selected LOCAL_DEBUG tracing backend",
            "trace_id": "abc123...",
            "span_id": "def456..."
        }
    """

    # Attributes every LogRecord carries
    STANDARD_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }

    def __init__(self, include_trace_context: bool = True) -> None:
        """Initialize the structured formatter.

        Args:
            include_trace_context: Include trace_id and span_id from OpenTelemetry.
        """
        super().__init__()
        self.include_trace_context = include_trace_context

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(timespec="microseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_trace_context:
            trace_context = current_trace_context()
            if trace_context:
                entry.update(trace_context)

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb)
                if exc_tb
                else None,
            }

        # Fields passed through extra=
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_FIELDS and not key.startswith("_"):
                entry[key] = value

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter with optional trace context.

        2024-01-15T10:30:45.123Z INFO     [tracerboot.sampler] [trace=abc123] Using ...
    """

    def __init__(self, include_trace_context: bool = True) -> None:
        super().__init__()
        self.include_trace_context = include_trace_context

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        timestamp = dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

        parts = [timestamp, record.levelname.ljust(8), f"[{record.name}]"]

        if self.include_trace_context:
            trace_context = current_trace_context()
            if trace_context:
                # Truncated for readability
                parts.append(f"[trace={trace_context['trace_id'][:16]}]")

        parts.append(record.getMessage())
        result = " ".join(parts)

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)

        return result
