"""Diagnostic logging with trace context correlation."""

from tracerboot.logging.manager import LoggerManager
from tracerboot.logging.structured import StructuredFormatter, TextFormatter

__all__ = ["LoggerManager", "StructuredFormatter", "TextFormatter"]
