"""Process-wide tracing state.

The active tracer provider is written once, at activation, and read by
any number of threads afterwards. Activating a second provider in the same
process is rejected; re-running the bootstrap is unsupported.
"""

import logging
import threading
from typing import Optional

from opentelemetry import trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from tracerboot.exceptions import TracerAlreadyActiveError

# Active provider
_active_provider: Optional[TracerProvider] = None
_lock = threading.Lock()

logger = logging.getLogger(__name__)


def activate(provider: TracerProvider) -> None:
    """Install a provider as the process-wide default.

    Sets the OpenTelemetry global tracer provider and a composite
    propagator that reads and writes both W3C trace context and baggage.

    Args:
        provider: Fully assembled tracer provider.

    Raises:
        TracerAlreadyActiveError: If a provider was already activated.
    """
    global _active_provider

    with _lock:
        if _active_provider is not None:
            raise TracerAlreadyActiveError("A tracer provider is already active")

        trace.set_tracer_provider(provider)
        if trace.get_tracer_provider() is not provider:
            logger.warning(
                "Global tracer provider was already set elsewhere; "
                "spans from the global API will not use this provider"
            )

        set_global_textmap(
            CompositePropagator(
                [TraceContextTextMapPropagator(), W3CBaggagePropagator()]
            )
        )
        _active_provider = provider


def get_tracer_provider() -> Optional[TracerProvider]:
    """Get the active tracer provider.

    Returns:
        The provider activated by the bootstrap, or None if tracing is
        not active.
    """
    return _active_provider


def is_active() -> bool:
    """Check whether a tracer provider has been activated."""
    return _active_provider is not None


def shutdown_tracing() -> None:
    """Flush and shut down the active provider.

    The provider stays registered; a shut-down provider drops new spans.
    """
    provider = _active_provider
    if provider is None:
        return

    logger.info("Shutting down tracer provider")
    try:
        provider.force_flush()
    except Exception as e:
        logger.error(f"Error flushing tracer provider: {e}")
    try:
        provider.shutdown()
    except Exception as e:
        logger.error(f"Error shutting down tracer provider: {e}")


def reset_tracing() -> None:
    """Shut down and forget the active provider (mainly for testing).

    Warning:
        This does not undo the OpenTelemetry global provider, which the
        API allows to be set only once per process.
    """
    global _active_provider

    shutdown_tracing()
    with _lock:
        _active_provider = None
