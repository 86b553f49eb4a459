"""Tracer bootstrap for service startup.

This module provides the TracerBootstrap class that builds a tracer
provider from configuration, activates it process-wide, and optionally
instruments an HTTP application.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import Sampler

from tracerboot import state
from tracerboot.backends import Backend, create_exporter, create_resource
from tracerboot.config import TracerConfig
from tracerboot.exceptions import (
    ConfigMissingError,
    ResourceError,
    TracerAlreadyActiveError,
)
from tracerboot.middleware import instrument_app
from tracerboot.sampler import build_sampler

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

SELF_TEST_TRACER = "InitializeTracer"
SELF_TEST_SPAN = "InitializeTracerSpan"
SELF_TEST_EVENT = "Tracer initialized successfully"


class TracerBootstrap:
    """One-shot tracing setup for a service process.

    Example:
        >>> config = TracerConfig.from_env()
        >>> bootstrap = TracerBootstrap("orders", "production", "api", config)
        >>> provider = bootstrap.run(app)
        >>> if provider is None:
        ...     logger.info("Tracing disabled")
    """

    def __init__(
        self,
        service_name: str,
        environment: str,
        module_name: str,
        config: TracerConfig,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize tracer bootstrap.

        Args:
            service_name: Service name resource attribute.
            environment: Deployment environment resource attribute.
            module_name: Module name resource attribute.
            config: Tracer configuration.
            timeout: Upper bound in seconds for network calls made while
                constructing the backend.
        """
        self.service_name = service_name
        self.environment = environment
        self.module_name = module_name
        self.config = config
        self.timeout = timeout
        self.backend: Optional[Backend] = None

    def run(self, app: Optional[FastAPI] = None) -> Optional[TracerProvider]:
        """Build, activate and self-test the tracer provider.

        Args:
            app: Application to instrument, if any.

        Returns:
            The active provider, or None when the selector matches no
            backend.

        Raises:
            ConfigMissingError: If no tracing tool is configured.
            ExporterError: If the backend's exporter cannot be built.
            ResourceError: If the cloud resource descriptor cannot be built.
            TracerAlreadyActiveError: If a provider is already active.
            RuntimeError: If the app has already started serving. The provider
                stays active; only the middleware is missing.
        """
        try:
            self.config.validate()
        except ConfigMissingError:
            logger.error("TracingTool is empty, skipping tracer initialization")
            raise

        provider = self.build_provider()
        if provider is None:
            return None

        self.activate(provider)

        if app is not None:
            instrument_app(app, provider)

        return provider

    def build_provider(self) -> Optional[TracerProvider]:
        """Assemble a tracer provider without activating it.

        Returns:
            The provider, or None when the selector matches no backend.
        """
        sampler = build_sampler(self.config.sampling_rate)

        self.backend = Backend.resolve(self.config)
        if self.backend is Backend.NONE:
            logger.warning(
                f"TracingTool {self.config.tracing_tool!r} matches no backend, "
                "tracing disabled"
            )
            return None

        logger.info(f"Selected {self.backend.name} tracing backend")

        exporter = create_exporter(self.backend, self.config, self.timeout)
        try:
            resource = create_resource(
                self.backend,
                self.service_name,
                self.environment,
                self.module_name,
                self.timeout,
            )
        except ResourceError as e:
            logger.error(f"Failed to create {self.backend.name} tracer resource: {e}")
            self._discard_exporter(exporter)
            raise

        provider = self._assemble(sampler, exporter, resource)
        logger.info(f"{self.backend.name} tracer provider created successfully")
        return provider

    def activate(self, provider: TracerProvider) -> None:
        """Activate a provider process-wide and emit the self-test span.

        Raises:
            TracerAlreadyActiveError: If a provider is already active. The
                rejected provider is shut down.
        """
        try:
            state.activate(provider)
        except TracerAlreadyActiveError:
            logger.error("Tracer provider already active, discarding new provider")
            provider.shutdown()
            raise

        self._emit_self_test(provider)

    def _assemble(
        self, sampler: Sampler, exporter: SpanExporter, resource: Resource
    ) -> TracerProvider:
        provider = TracerProvider(sampler=sampler, resource=resource)
        provider.add_span_processor(
            BatchSpanProcessor(
                exporter,
                max_queue_size=2048,
                schedule_delay_millis=5000,
                max_export_batch_size=512,
            )
        )
        return provider

    def _emit_self_test(self, provider: TracerProvider) -> None:
        """Emit one span confirming the export path works.

        Failures are logged, not raised.
        """
        try:
            tracer = provider.get_tracer(SELF_TEST_TRACER)
            span = tracer.start_span(SELF_TEST_SPAN)
            span.add_event(SELF_TEST_EVENT)
            span.end()
        except Exception as e:
            logger.error(f"Tracer self-test span failed: {e}", exc_info=True)

    def _discard_exporter(self, exporter: SpanExporter) -> None:
        try:
            exporter.shutdown()
        except Exception as e:
            logger.error(f"Error shutting down exporter: {e}")


def init_tracer(
    service_name: str,
    environment: str,
    module_name: str,
    config: TracerConfig,
    app: Optional[FastAPI] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[TracerProvider]:
    """Initialize tracing for this process.

    Args:
        service_name: Service name resource attribute.
        environment: Deployment environment resource attribute.
        module_name: Module name resource attribute.
        config: Tracer configuration.
        app: Application to instrument, if any.
        timeout: Upper bound in seconds for backend network calls.

    Returns:
        The active provider, or None when tracing is disabled.

    Example:
        >>> provider = init_tracer(
        ...     "orders", "production", "api", TracerConfig.from_env(), app
        ... )
    """
    bootstrap = TracerBootstrap(
        service_name, environment, module_name, config, timeout=timeout
    )
    return bootstrap.run(app)
