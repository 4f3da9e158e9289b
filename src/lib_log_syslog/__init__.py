"""Bounded, reconnecting syslog writer.

Use the runtime façade (``init``/``get``/``shutdown``) for a process-wide
writer configured from ``LOG_SYSLOG_*`` variables, or compose a
:class:`LogWriter` from a formatter, transport, and reconnection strategy
directly.
"""

from __future__ import annotations

from .adapters import (
    AcquireSame,
    GiveUp,
    LogOption,
    LogWriterHandler,
    ProbeRecommended,
    Rfc3164Formatter,
    Rfc5424Formatter,
    SystemSyslogWriter,
    TcpFraming,
    TimestampPolicy,
    connect_recommended,
    connect_transport,
)
from .application.use_cases import BufferOverflowStrategy, LogWriter
from .config import SyslogConfig, exe_name_from_env, load_config
from .domain import (
    BufferOverflowError,
    Facility,
    LogLevel,
    LogRecord,
    MaxByteWriter,
    Severity,
    SyslogError,
    SyslogFormatError,
    TransportAddress,
    TransportKind,
    TransportUnavailableError,
    default_level_mapping,
    encode_priority,
)
from .runtime import RuntimeSnapshot, attach_logging_handler, flush, get, init, inspect_runtime, shutdown

__all__ = [
    "AcquireSame",
    "BufferOverflowError",
    "BufferOverflowStrategy",
    "Facility",
    "GiveUp",
    "LogLevel",
    "LogOption",
    "LogRecord",
    "LogWriter",
    "LogWriterHandler",
    "MaxByteWriter",
    "ProbeRecommended",
    "Rfc3164Formatter",
    "Rfc5424Formatter",
    "RuntimeSnapshot",
    "Severity",
    "SyslogConfig",
    "SyslogError",
    "SyslogFormatError",
    "SystemSyslogWriter",
    "TcpFraming",
    "TimestampPolicy",
    "TransportAddress",
    "TransportKind",
    "TransportUnavailableError",
    "attach_logging_handler",
    "connect_recommended",
    "connect_transport",
    "default_level_mapping",
    "encode_priority",
    "exe_name_from_env",
    "flush",
    "get",
    "init",
    "inspect_runtime",
    "load_config",
    "shutdown",
]
