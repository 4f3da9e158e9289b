"""Adapters implementing the application ports: formatters, transports, reconnection."""

from __future__ import annotations

from .clock import SystemClock
from .formatters import Rfc3164Formatter, Rfc5424Formatter, TimestampPolicy
from .logging_handler import LogWriterHandler
from .reconnect import AcquireSame, GiveUp, ProbeRecommended
from .system_syslog import LogOption, SystemSyslogWriter
from .transports import (
    RECOMMENDED_SOCKET_PATHS,
    TcpFraming,
    TcpTransport,
    UdpTransport,
    UnixDatagramTransport,
    UnixStreamTransport,
    connect_recommended,
    connect_transport,
)

__all__ = [
    "AcquireSame",
    "GiveUp",
    "LogOption",
    "LogWriterHandler",
    "ProbeRecommended",
    "RECOMMENDED_SOCKET_PATHS",
    "Rfc3164Formatter",
    "Rfc5424Formatter",
    "SystemClock",
    "SystemSyslogWriter",
    "TcpFraming",
    "TcpTransport",
    "TimestampPolicy",
    "UdpTransport",
    "UnixDatagramTransport",
    "UnixStreamTransport",
    "connect_recommended",
    "connect_transport",
]
