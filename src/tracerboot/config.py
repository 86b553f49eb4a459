"""Configuration for tracer bootstrap and diagnostic logging.

Values are read from environment variables or built programmatically.
The tracer configuration injects no defaults of its own: an empty field
stays empty and is handled by the bootstrap sequence.
"""

import os
from dataclasses import dataclass
from typing import Optional

from tracerboot.exceptions import ConfigMissingError


@dataclass(frozen=True)
class TracerConfig:
    """Immutable input record for the tracer bootstrap.

    Example:
        >>> config = TracerConfig(
        ...     tracing_tool="STDOUT",
        ...     sampling_rate="0.25",
        ... )
        >>> config.validate()
    """

    tracing_tool: str = ""
    otlp_endpoint: str = ""
    google_cloud_project: str = ""
    jaeger_endpoint: str = ""
    sampling_rate: str = ""
    otlp_protocol: str = "http"  # or "grpc"

    @classmethod
    def from_env(cls) -> "TracerConfig":
        """Create configuration from environment variables.

        Environment Variables:
            TRACING_TOOL: Backend selector, e.g. GCP, STDOUT or JAEGER
            OTLP_ENDPOINT: Collector endpoint used when JAEGER_ENDPOINT is unset
            GOOGLE_CLOUD_PROJECT: Project ID for the Cloud Trace backend
            JAEGER_ENDPOINT: Collector endpoint for the JAEGER backend
            TRACER_SAMPLING_RATE: Ratio 0.0-1.0 (empty means sample everything)
            OTLP_PROTOCOL: Collector protocol - http or grpc (default: http)
        """
        return cls(
            tracing_tool=os.getenv("TRACING_TOOL", ""),
            otlp_endpoint=os.getenv("OTLP_ENDPOINT", ""),
            google_cloud_project=os.getenv("GOOGLE_CLOUD_PROJECT", ""),
            jaeger_endpoint=os.getenv("JAEGER_ENDPOINT", ""),
            sampling_rate=os.getenv("TRACER_SAMPLING_RATE", ""),
            otlp_protocol=os.getenv("OTLP_PROTOCOL", "http").lower(),
        )

    @property
    def collector_endpoint(self) -> str:
        """Endpoint for the collector backend."""
        return self.jaeger_endpoint or self.otlp_endpoint

    def validate(self) -> None:
        """Check that a tracing tool has been selected.

        Only the selector is checked here; missing endpoints or project IDs
        surface later when the chosen backend is constructed.

        Raises:
            ConfigMissingError: If the selector is empty or whitespace-only.
        """
        if not self.tracing_tool.strip():
            raise ConfigMissingError("tracing tool not configured")


@dataclass
class LoggingConfig:
    """Configuration for diagnostic logging."""

    level: str = "INFO"
    format: str = "text"  # or "json"
    trace_correlation: bool = True
    output_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables.

        Environment Variables:
            TRACERBOOT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
            TRACERBOOT_LOG_FORMAT: text or json (default: text)
            TRACERBOOT_LOG_TRACE_CORRELATION: Include trace IDs (default: true)
            TRACERBOOT_LOG_FILE: Log file path (optional, defaults to stdout)
        """
        return cls(
            level=os.getenv("TRACERBOOT_LOG_LEVEL", "INFO").upper(),
            format=os.getenv("TRACERBOOT_LOG_FORMAT", "text").lower(),
            trace_correlation=os.getenv(
                "TRACERBOOT_LOG_TRACE_CORRELATION", "true"
            ).lower()
            == "true",
            output_file=os.getenv("TRACERBOOT_LOG_FILE"),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If the level or format is unknown.
        """
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level not in valid_levels:
            raise ValueError(
                f"Invalid log level: {self.level}. Must be one of {valid_levels}"
            )
        if self.format not in ("json", "text"):
            raise ValueError(
                f"Invalid log format: {self.format}. Must be 'json' or 'text'"
            )
