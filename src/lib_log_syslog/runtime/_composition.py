"""Runtime composition helpers wiring domain, application, and adapters.

Purpose
-------
Translate a :class:`~lib_log_syslog.config.SyslogConfig` into a live
:class:`LogWriter`: formatter, reconnection strategy, and (when reachable) the
initial transport.

System Role
-----------
Anchors the clean-architecture boundary: concrete adapters are chosen here,
while :mod:`lib_log_syslog.runtime` exposes only the façade.
"""

from __future__ import annotations

import logging
from typing import Any

from lib_log_syslog.adapters.formatters import Rfc3164Formatter, Rfc5424Formatter
from lib_log_syslog.adapters.reconnect import AcquireSame, GiveUp, ProbeRecommended
from lib_log_syslog.adapters.transports import connect_recommended, connect_transport
from lib_log_syslog.application.ports import ClockPort, FormatterPort, ReconnectPort, TransportPort
from lib_log_syslog.application.use_cases.log_writer import DiagnosticHook, LogWriter
from lib_log_syslog.config import MessageFormat, ReconnectMode, SyslogConfig
from lib_log_syslog.domain.levels import LogLevel, coerce_level
from lib_log_syslog.domain.structured_data import StructuredData

LOGGER = logging.getLogger(__name__)


def build_formatter(config: SyslogConfig, *, clock: ClockPort | None = None) -> FormatterPort:
    """Return the formatter selected by ``config.format``."""

    if config.format is MessageFormat.RFC3164:
        return Rfc3164Formatter(
            facility=config.facility,
            hostname=config.hostname,
            app_name=config.app_name,
            process_id=config.process_id,
            timestamp=config.timestamp,
            clock=clock,
        )
    return Rfc5424Formatter(
        facility=config.facility,
        hostname=config.hostname,
        app_name=config.app_name,
        process_id=config.process_id,
        timestamp=config.timestamp,
        clock=clock,
    )


def build_reconnect(config: SyslogConfig) -> ReconnectPort:
    """Return the reconnection strategy selected by ``config.reconnect``.

    Without a configured address there is nothing fixed to reacquire, so
    ``acquire-same`` probes the well-known local sockets instead.
    """

    if config.reconnect is ReconnectMode.GIVE_UP:
        return GiveUp()
    if config.reconnect is ReconnectMode.PROBE or config.address is None:
        return ProbeRecommended(timeout=config.timeout)
    return AcquireSame(config.address, timeout=config.timeout, tcp_framing=config.tcp_framing)


def connect_initial(config: SyslogConfig) -> TransportPort | None:
    """Open the first transport, or return ``None`` so the first write reconnects."""

    try:
        if config.address is None:
            return connect_recommended(timeout=config.timeout)
        return connect_transport(config.address, timeout=config.timeout, tcp_framing=config.tcp_framing)
    except OSError as exc:
        target = str(config.address) if config.address is not None else "local syslog socket"
        LOGGER.warning("could not connect to %s yet: %s", target, exc)
        return None


def build_writer(
    config: SyslogConfig,
    *,
    transport: TransportPort | None = None,
    connect: bool = True,
    clock: ClockPort | None = None,
    diagnostic: DiagnosticHook = None,
) -> LogWriter:
    """Assemble a :class:`LogWriter` from resolved configuration.

    ``transport`` replaces the connection attempt (tests, pre-connected
    sockets); ``connect=False`` skips it so the first write connects lazily.
    """

    if transport is None and connect:
        transport = connect_initial(config)
    return LogWriter(
        formatter=build_formatter(config, clock=clock),
        reconnect=build_reconnect(config),
        transport=transport,
        capacity=config.max_bytes,
        max_log_level=config.level,
        overflow=config.overflow,
        diagnostic=diagnostic,
    )


class LoggerProxy:
    """Named façade forwarding level-specific calls to the writer.

    Each call checks the writer's ``max_log_level`` first; filtered calls
    return ``{"ok": False, "reason": "filtered"}`` without rendering.
    """

    def __init__(self, name: str, writer: LogWriter) -> None:
        self._name = name
        self._writer = writer

    @property
    def name(self) -> str:
        return self._name

    def log(
        self,
        level: LogLevel | str,
        message: Any,
        *,
        structured_data: StructuredData | None = None,
        msg_id: str | None = None,
    ) -> dict[str, Any]:
        resolved = coerce_level(level)
        if not self._writer.enabled(resolved):
            return {"ok": False, "reason": "filtered"}
        return self._writer.write(resolved, message, structured_data, msg_id=msg_id)

    def trace(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self.log(LogLevel.TRACE, message, **kwargs)

    def debug(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self.log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self.log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self.log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self.log(LogLevel.ERROR, message, **kwargs)

    def critical(self, message: Any, **kwargs: Any) -> dict[str, Any]:
        return self.log(LogLevel.CRITICAL, message, **kwargs)


__all__ = ["LoggerProxy", "build_formatter", "build_reconnect", "build_writer", "connect_initial"]
