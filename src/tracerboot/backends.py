"""Trace exporter backends.

This module resolves which backend the configuration selects and builds
the span exporter and resource descriptor for it. Three backends exist:

- CLOUD: Google Cloud Trace, with GCP platform resource detection
- LOCAL_DEBUG: pretty-printed JSON spans on standard output
- COLLECTOR: an OTLP collector (Jaeger or any OTLP-compatible endpoint)
"""

import logging
import os
import sys
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter as GrpcSpanExporter,
)
from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    OTLPSpanExporter as HttpSpanExporter,
)
from opentelemetry.resourcedetector.gcp_resource_detector import (
    GoogleCloudResourceDetector,
)
from opentelemetry.sdk.resources import SERVICE_NAME, Resource, get_aggregated_resources
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SpanExporter

from tracerboot.config import TracerConfig
from tracerboot.exceptions import ExporterError, ResourceError

logger = logging.getLogger(__name__)

SCHEMA_URL = "https://opentelemetry.io/schemas/1.37.0"

ENVIRONMENT_KEY = "environment"
MODULE_KEY = "module"


class Backend(str, Enum):
    """Trace export backend, keyed by the selector keyword that picks it."""

    CLOUD = "GCP"
    LOCAL_DEBUG = "STDOUT"
    COLLECTOR = "JAEGER"
    NONE = "NONE"

    @classmethod
    def resolve(cls, config: TracerConfig) -> "Backend":
        """Resolve the backend selected by the configuration.

        Rules are checked in priority order and the first match wins. The
        selector may name several keywords; matching is a case-sensitive
        substring test.

        Args:
            config: Tracer configuration.

        Returns:
            The selected backend, or Backend.NONE if nothing matches.
        """
        tool = config.tracing_tool
        if cls.CLOUD.value in tool and config.google_cloud_project:
            return cls.CLOUD
        if cls.LOCAL_DEBUG.value in tool:
            return cls.LOCAL_DEBUG
        if cls.COLLECTOR.value in tool:
            return cls.COLLECTOR
        return cls.NONE


def create_exporter(
    backend: Backend, config: TracerConfig, timeout: Optional[float] = None
) -> SpanExporter:
    """Create the span exporter for a backend.

    Args:
        backend: Resolved backend (must not be Backend.NONE).
        config: Tracer configuration.
        timeout: Export timeout in seconds for network exporters.

    Returns:
        SpanExporter bound to the backend's sink.

    Raises:
        ExporterError: If the exporter cannot be constructed.
    """
    try:
        if backend is Backend.CLOUD:
            return CloudTraceSpanExporter(project_id=config.google_cloud_project)
        if backend is Backend.LOCAL_DEBUG:
            return ConsoleSpanExporter(out=sys.stdout, formatter=_pretty_json)
        if backend is Backend.COLLECTOR:
            return _create_collector_exporter(config, timeout)
    except ExporterError:
        raise
    except Exception as e:
        raise ExporterError(
            f"Failed to create {backend.name} exporter: {e}",
            backend=backend.name,
            cause=e,
        ) from e

    raise ExporterError(f"No exporter for backend {backend.name}", backend=backend.name)


def create_resource(
    backend: Backend,
    service_name: str,
    environment: str,
    module_name: str,
    timeout: Optional[float] = None,
) -> Resource:
    """Create the resource descriptor identifying this process.

    The cloud backend adds attributes detected from the GCP platform and
    the SDK's telemetry attributes. Other backends carry only the schema
    URL and the identity attributes.

    Args:
        backend: Resolved backend.
        service_name: Service name attribute.
        environment: Deployment environment attribute.
        module_name: Module name attribute.
        timeout: Upper bound in seconds for platform detection.

    Returns:
        Resource with service identity attributes.

    Raises:
        ResourceError: If platform detection fails or times out.
    """
    identity = {
        SERVICE_NAME: service_name,
        ENVIRONMENT_KEY: environment,
        MODULE_KEY: module_name,
    }

    if backend is not Backend.CLOUD:
        return Resource(identity, schema_url=SCHEMA_URL)

    try:
        detected = get_aggregated_resources(
            [GoogleCloudResourceDetector(raise_on_error=True)],
            timeout=timeout if timeout is not None else 5,
        )
    except Exception as e:
        raise ResourceError(f"GCP resource detection failed: {e}", cause=e) from e

    return detected.merge(Resource.create(identity))


def _create_collector_exporter(
    config: TracerConfig, timeout: Optional[float]
) -> SpanExporter:
    """Create an OTLP exporter for the collector backend."""
    endpoint = config.collector_endpoint or None

    if config.otlp_protocol == "grpc":
        insecure = not (endpoint or "").startswith("https://")
        return GrpcSpanExporter(endpoint=endpoint, insecure=insecure, timeout=timeout)
    elif config.otlp_protocol == "http":
        return HttpSpanExporter(
            endpoint=_http_traces_endpoint(endpoint), timeout=timeout
        )

    raise ExporterError(
        f"Unknown OTLP protocol: {config.otlp_protocol}",
        backend=Backend.COLLECTOR.name,
    )


def _http_traces_endpoint(endpoint: Optional[str]) -> Optional[str]:
    """Complete a bare host:port into an OTLP/HTTP traces URL."""
    if not endpoint:
        return None
    if "://" not in endpoint:
        endpoint = f"http://{endpoint}"
    if urlsplit(endpoint).path in ("", "/"):
        endpoint = endpoint.rstrip("/") + "/v1/traces"
    return endpoint


def _pretty_json(span: ReadableSpan) -> str:
    return span.to_json(indent=4) + os.linesep
