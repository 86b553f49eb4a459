"""Distributed tracing bootstrap for service processes.

Selects a trace export backend from configuration, builds a sampled
OpenTelemetry tracer provider, activates it process-wide, and optionally
instruments a FastAPI application.

Example:
    >>> from tracerboot import TracerConfig, init_tracer
    >>>
    >>> provider = init_tracer(
    ...     "orders", "production", "api", TracerConfig.from_env(), app
    ... )
    >>> if provider is None:
    ...     print("Tracing disabled")
"""

from tracerboot.backends import Backend
from tracerboot.bootstrap import TracerBootstrap, init_tracer
from tracerboot.config import LoggingConfig, TracerConfig
from tracerboot.exceptions import (
    ConfigMissingError,
    ExporterError,
    ResourceError,
    TracerAlreadyActiveError,
    TracerBootstrapError,
)
from tracerboot.state import get_tracer_provider, shutdown_tracing

__all__ = [
    "Backend",
    "ConfigMissingError",
    "ExporterError",
    "LoggingConfig",
    "ResourceError",
    "TracerAlreadyActiveError",
    "TracerBootstrap",
    "TracerBootstrapError",
    "TracerConfig",
    "get_tracer_provider",
    "init_tracer",
    "shutdown_tracing",
]
