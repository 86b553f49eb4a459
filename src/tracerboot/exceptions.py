"""Exceptions raised while bootstrapping tracing.

Every failure that aborts the bootstrap sequence is a subclass of
TracerBootstrapError, so callers can decide in one place whether a
tracing failure should stop the service.

Example:
    >>> from tracerboot.exceptions import TracerBootstrapError
    >>> try:
    ...     init_tracer("orders", "prod", "api", config)
    ... except TracerBootstrapError as e:
    ...     logger.error(f"Tracing disabled: {e}")
"""

from typing import Optional


class TracerBootstrapError(Exception):
    """Base exception for all tracer bootstrap errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        """Initialize bootstrap error.

        Args:
            message: Error description.
            cause: Original exception that caused this error.
        """
        super().__init__(message)
        self.cause = cause


class ConfigMissingError(TracerBootstrapError):
    """The tracing tool selector is empty or whitespace-only.

    Example:
        >>> raise ConfigMissingError("tracing tool not configured")
    """

    pass


class ExporterError(TracerBootstrapError):
    """A backend's span exporter could not be constructed."""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize exporter error.

        Args:
            message: Error description.
            backend: Name of the backend whose exporter failed.
            cause: Original exception.
        """
        super().__init__(message, cause)
        self.backend = backend


class ResourceError(TracerBootstrapError):
    """The resource descriptor could not be built.

    Raised when platform detection fails or times out for the cloud backend.
    """

    pass


class TracerAlreadyActiveError(TracerBootstrapError):
    """A tracer provider has already been activated in this process.

    Re-running the bootstrap is unsupported; the first provider stays active.
    """

    pass
