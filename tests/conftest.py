"""Pytest fixtures for tracerboot tests.

Tracing state is process-wide, so every test starts and ends with a clean
slate: no active provider, no OpenTelemetry global provider, and the
original global propagator.
"""

from typing import Generator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.propagate import get_global_textmap, set_global_textmap
from opentelemetry.sdk.resources import Resource, ResourceDetector
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.util._once import Once

from tracerboot import state
from tracerboot.config import TracerConfig


def _reset_otel_globals() -> None:
    # Same reset the OpenTelemetry test utilities perform
    trace._TRACER_PROVIDER_SET_ONCE = Once()
    trace._TRACER_PROVIDER = None


@pytest.fixture(autouse=True)
def clean_tracing() -> Generator[None, None, None]:
    """Reset process-wide tracing state around each test."""
    propagator = get_global_textmap()
    state.reset_tracing()
    _reset_otel_globals()
    yield
    state.reset_tracing()
    _reset_otel_globals()
    set_global_textmap(propagator)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def stdout_config() -> TracerConfig:
    """Configuration selecting the local-debug backend."""
    return TracerConfig(tracing_tool="STDOUT")


@pytest.fixture
def gcp_config() -> TracerConfig:
    """Configuration selecting the cloud backend."""
    return TracerConfig(tracing_tool="GCP", google_cloud_project="test-project")


@pytest.fixture
def jaeger_config() -> TracerConfig:
    """Configuration selecting the collector backend."""
    return TracerConfig(tracing_tool="JAEGER", jaeger_endpoint="localhost:4318")


# =============================================================================
# Exporter Fixtures
# =============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter for inspecting finished spans."""
    return InMemorySpanExporter()


@pytest.fixture
def patched_exporter(
    monkeypatch: pytest.MonkeyPatch, span_exporter: InMemorySpanExporter
) -> MagicMock:
    """Make every backend export into the in-memory exporter.

    Returns:
        The mock standing in for create_exporter, for call inspection.
    """
    factory = MagicMock(return_value=span_exporter)
    monkeypatch.setattr("tracerboot.bootstrap.create_exporter", factory)
    return factory


@pytest.fixture
def app() -> FastAPI:
    """Small FastAPI application with one route."""
    application = FastAPI()

    @application.get("/items/{item_id}")
    def read_item(item_id: int) -> dict:
        return {"item_id": item_id}

    return application


# =============================================================================
# Resource Fixtures
# =============================================================================


class FakeGcpDetector(ResourceDetector):
    """Detector returning fixed GCP platform attributes."""

    def detect(self) -> Resource:
        return Resource(
            {
                "cloud.provider": "gcp",
                "cloud.platform": "gcp_kubernetes_engine",
                "service.name": "detected-name",
            }
        )


@pytest.fixture
def fake_gcp_detector(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace GCP platform detection with fixed attributes."""
    monkeypatch.setattr(
        "tracerboot.backends.GoogleCloudResourceDetector", FakeGcpDetector
    )
