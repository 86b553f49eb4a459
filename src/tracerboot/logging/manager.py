"""Logger manager for bootstrap diagnostics.

Diagnostics from every tracerboot module go through the ``tracerboot``
logger. LoggerManager attaches a single handler to it, writing to
standard output unless a log file is configured.
"""

import logging
import sys
from typing import Optional

from tracerboot.config import LoggingConfig
from tracerboot.logging.structured import StructuredFormatter, TextFormatter

ROOT_LOGGER_NAME = "tracerboot"


class LoggerManager:
    """Manager for the tracerboot logger.

    Example:
        >>> from tracerboot.config import LoggingConfig
        >>> manager = LoggerManager(LoggingConfig(level="DEBUG", format="json"))
        >>> manager.configure()
        >>> provider = init_tracer("orders", "dev", "api", config)
        >>> manager.shutdown()
    """

    def __init__(self, config: LoggingConfig) -> None:
        """Initialize the logger manager.

        Args:
            config: Logging configuration.
        """
        self.config = config
        self._handler: Optional[logging.Handler] = None
        self._formatter: Optional[logging.Formatter] = None
        self._configured = False

    def configure(self) -> None:
        """Attach the handler and set the level on the tracerboot logger.

        Raises:
            ValueError: If the logging configuration is invalid.
        """
        if self._configured:
            return

        self.config.validate()

        if self.config.format == "json":
            self._formatter = StructuredFormatter(
                include_trace_context=self.config.trace_correlation,
            )
        else:
            self._formatter = TextFormatter(
                include_trace_context=self.config.trace_correlation,
            )

        if self.config.output_file:
            self._handler = logging.FileHandler(self.config.output_file)
        else:
            self._handler = logging.StreamHandler(sys.stdout)

        self._handler.setFormatter(self._formatter)

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(getattr(logging, self.config.level, logging.INFO))
        root_logger.addHandler(self._handler)
        root_logger.propagate = False

        self._configured = True

    def shutdown(self) -> None:
        """Remove and close the handler."""
        if not self._configured:
            return

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        if self._handler:
            root_logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None

        root_logger.propagate = True
        self._configured = False

    @property
    def is_configured(self) -> bool:
        """Check if the logger manager has been configured."""
        return self._configured
