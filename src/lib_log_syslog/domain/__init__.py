"""Domain entities and value objects used by the syslog writer."""

from __future__ import annotations

from .address import TransportAddress, TransportKind
from .bounded import ByteBuffer, ByteSink, MaxByteWriter
from .errors import BufferOverflowError, SyslogError, SyslogFormatError, TransportUnavailableError
from .events import LogRecord
from .levels import LogLevel, coerce_level
from .severity import Facility, LevelToSeverity, Severity, default_level_mapping, encode_priority
from .structured_data import StructuredData, render_structured_data

__all__ = [
    "BufferOverflowError",
    "ByteBuffer",
    "ByteSink",
    "Facility",
    "LevelToSeverity",
    "LogLevel",
    "LogRecord",
    "MaxByteWriter",
    "Severity",
    "StructuredData",
    "SyslogError",
    "SyslogFormatError",
    "TransportAddress",
    "TransportKind",
    "TransportUnavailableError",
    "coerce_level",
    "default_level_mapping",
    "encode_priority",
    "render_structured_data",
]
