"""Application use cases."""

from __future__ import annotations

from .buffered_transport import BufferedTransport
from .log_writer import DEFAULT_CAPACITY, BufferOverflowStrategy, DiagnosticHook, LogWriter

__all__ = ["DEFAULT_CAPACITY", "BufferOverflowStrategy", "BufferedTransport", "DiagnosticHook", "LogWriter"]
