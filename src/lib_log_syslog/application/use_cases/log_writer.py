"""Use case turning one log record into one syslog datagram.

Purpose
-------
Orchestrate format → bound → send → reconnect for every record while many
producer threads log concurrently.

Contents
--------
* :class:`BufferOverflowStrategy` - ``ignore`` (send truncated) or ``fail``.
* :class:`LogWriter` - the orchestrator exposing ``write``, ``flush`` and the
  ``max_log_level`` gate.

System Role
-----------
Application-layer core. Built by :mod:`lib_log_syslog.runtime` from
configuration or directly by hosts wiring their own formatter, transport, and
reconnection strategy.

Alignment Notes
---------------
Delivery is at-most-once: a record whose send fails is lost, reconnection only
protects the records that follow. Diagnostics (``send_failed``,
``reconnected``, ``reconnect_failed``, ``buffer_truncated``, ``write_failed``)
go to this module's logger and the optional diagnostic hook after the lock is
released.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from lib_log_syslog.application.ports.formatter import FormatterPort
from lib_log_syslog.application.ports.reconnect import ReconnectPort
from lib_log_syslog.application.ports.transport import TransportPort
from lib_log_syslog.domain.bounded import ByteBuffer, MaxByteWriter
from lib_log_syslog.domain.errors import BufferOverflowError, SyslogFormatError, TransportUnavailableError
from lib_log_syslog.domain.events import LogRecord
from lib_log_syslog.domain.levels import LogLevel, coerce_level
from lib_log_syslog.domain.severity import LevelToSeverity, Severity, default_level_mapping, ensure_total_mapping
from lib_log_syslog.domain.structured_data import StructuredData

from .buffered_transport import BufferedTransport

LOGGER = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1024

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None

_DIAGNOSTIC_LEVELS = {
    "buffer_truncated": logging.DEBUG,
    "reconnected": logging.INFO,
    "send_failed": logging.WARNING,
    "reconnect_failed": logging.WARNING,
    "write_failed": logging.ERROR,
}

_Note = tuple[str, dict[str, Any], BaseException | None]


class BufferOverflowStrategy(str, Enum):
    """What to do when a rendered message does not fit the buffer."""

    IGNORE = "ignore"
    FAIL = "fail"

    @classmethod
    def from_name(cls, name: "str | BufferOverflowStrategy") -> "BufferOverflowStrategy":
        if isinstance(name, BufferOverflowStrategy):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise ValueError(f"overflow strategy must be 'ignore' or 'fail', got {name!r}") from exc


class LogWriter:
    """Format records into a bounded buffer and ship them over a reconnecting transport.

    Examples
    --------
    >>> from lib_log_syslog.adapters.formatters.rfc5424 import Rfc5424Formatter
    >>> from lib_log_syslog.adapters.reconnect import GiveUp
    >>> class Recorder:
    ...     address = None
    ...     def __init__(self):
    ...         self.sent = []
    ...     def send(self, data):
    ...         self.sent.append(data)
    ...         return len(data)
    ...     def flush(self):
    ...         pass
    ...     def close(self):
    ...         pass
    >>> transport = Recorder()
    >>> writer = LogWriter(formatter=Rfc5424Formatter(app_name="demo"), transport=transport, reconnect=GiveUp())
    >>> writer.write(LogLevel.INFO, "hello")["ok"]
    True
    >>> transport.sent[0].endswith(b" demo - - - hello")
    True
    """

    def __init__(
        self,
        *,
        formatter: FormatterPort,
        reconnect: ReconnectPort,
        transport: TransportPort | None = None,
        capacity: int = DEFAULT_CAPACITY,
        max_log_level: LogLevel | str = LogLevel.INFO,
        level_to_severity: LevelToSeverity = default_level_mapping,
        overflow: BufferOverflowStrategy | str = BufferOverflowStrategy.IGNORE,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        """Validate configuration and take ownership of ``transport``.

        Parameters
        ----------
        formatter:
            Renders severity, identity, and message into the buffer.
        reconnect:
            Strategy invoked when a send fails or no transport is held.
        transport:
            Initially connected transport; ``None`` defers connecting to the
            first write through ``reconnect``.
        capacity:
            Maximum encoded size of one message in bytes.
        max_log_level:
            Least severe level callers should forward (see :meth:`enabled`).
        level_to_severity:
            Total mapping from :class:`LogLevel` to :class:`Severity`.
        overflow:
            :class:`BufferOverflowStrategy` for messages exceeding ``capacity``.
        diagnostic:
            Optional ``(name, payload)`` callback mirroring the side-channel log.

        Raises
        ------
        ValueError
            When ``capacity`` is not positive, the mapping is not total, or a
            level/strategy name is unknown.
        """
        self._formatter = formatter
        self._level_to_severity = ensure_total_mapping(level_to_severity)
        self._max_log_level = coerce_level(max_log_level)
        self._overflow = BufferOverflowStrategy.from_name(overflow)
        self._diagnostic = diagnostic
        self._state = BufferedTransport(capacity=capacity, transport=transport, reconnect=reconnect)

    @property
    def capacity(self) -> int:
        return self._state.buffer.capacity

    @property
    def max_log_level(self) -> LogLevel:
        """Configured ceiling callers use to skip building records at all."""
        return self._max_log_level

    @property
    def overflow(self) -> BufferOverflowStrategy:
        return self._overflow

    @property
    def connected(self) -> bool:
        with self._state.acquire() as state:
            return state.transport is not None

    def enabled(self, level: LogLevel | str) -> bool:
        """Return ``True`` when ``level`` passes :attr:`max_log_level`."""
        return self._max_log_level.allows(coerce_level(level))

    def severity_for(self, level: LogLevel | str) -> Severity:
        return self._level_to_severity(coerce_level(level))

    def write_record(self, record: LogRecord) -> dict[str, Any]:
        """Write ``record``; see :meth:`write`."""
        return self.write(record.level, record.message, record.structured_data, msg_id=record.msg_id)

    def write(
        self,
        level: LogLevel | str,
        message: Any,
        structured_data: StructuredData | None = None,
        *,
        msg_id: str | None = None,
    ) -> dict[str, Any]:
        """Format and send one message, returning a delivery summary.

        Returns
        -------
        dict[str, Any]
            ``{"ok": True, "bytes": n, "truncated": bool}`` when the transport
            accepted the message, otherwise ``{"ok": False, "reason": ...}``
            with ``reason`` ``"transport_error"`` or ``"internal_error"``.

        Raises
        ------
        SyslogFormatError
            The message could not be rendered into the buffer.
        BufferOverflowError
            The message did not fit and the overflow strategy is ``fail``;
            nothing was sent.
        """
        severity = self.severity_for(level)
        notes: list[_Note] = []
        try:
            with self._state.acquire() as state:
                return self._write_locked(state, severity, message, structured_data, msg_id, notes)
        except SyslogFormatError:
            raise
        except Exception as exc:  # noqa: BLE001
            notes.append(("write_failed", {"exception": repr(exc)}, exc))
            return {"ok": False, "reason": "internal_error", "error": repr(exc)}
        finally:
            self._emit_notes(notes)

    def render(
        self,
        level: LogLevel | str,
        message: Any,
        structured_data: StructuredData | None = None,
        *,
        msg_id: str | None = None,
    ) -> bytes:
        """Return the bytes :meth:`write` would send, without touching the transport."""
        buffer = ByteBuffer(self.capacity)
        sink = MaxByteWriter(buffer, buffer.capacity)
        self._formatter.format(sink, self.severity_for(level), message, structured_data, msg_id)
        if sink.overflowed and self._overflow is BufferOverflowStrategy.FAIL:
            raise BufferOverflowError(buffer.capacity, sink.offered)
        return buffer.getvalue()

    def flush(self) -> None:
        """Flush the held transport.

        Raises
        ------
        TransportUnavailableError
            No transport is currently connected.
        OSError
            The transport failed to flush.
        """
        with self._state.acquire() as state:
            if state.transport is None:
                raise TransportUnavailableError("cannot flush: no syslog transport connected")
            state.transport.flush()

    def close(self) -> None:
        """Close and forget the held transport; later writes reconnect on demand."""
        with self._state.acquire() as state:
            transport, state.transport = state.transport, None
            if transport is not None:
                transport.close()

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def _write_locked(
        self,
        state: BufferedTransport,
        severity: Severity,
        message: Any,
        structured_data: StructuredData | None,
        msg_id: str | None,
        notes: list[_Note],
    ) -> dict[str, Any]:
        buffer = state.buffer
        buffer.clear()
        try:
            sink = MaxByteWriter(buffer, buffer.capacity)
            self._formatter.format(sink, severity, message, structured_data, msg_id)
            if sink.overflowed:
                if self._overflow is BufferOverflowStrategy.FAIL:
                    raise BufferOverflowError(buffer.capacity, sink.offered)
                notes.append(("buffer_truncated", {"capacity": buffer.capacity, "attempted": sink.offered}, None))

            if state.transport is None:
                self._reconnect(state, TransportUnavailableError("no syslog transport connected"), notes)

            payload = buffer.getvalue()
            try:
                transport = state.transport
                if transport is None:
                    raise TransportUnavailableError("no syslog transport connected")
                sent = transport.send(payload)
            except OSError as exc:
                notes.append(("send_failed", {"error": repr(exc), "bytes": len(payload)}, None))
                self._reconnect(state, exc, notes)
                return {"ok": False, "reason": "transport_error", "error": repr(exc)}
            return {"ok": True, "bytes": sent, "truncated": sink.overflowed}
        finally:
            buffer.clear()

    @staticmethod
    def _reconnect(state: BufferedTransport, error: BaseException, notes: list[_Note]) -> bool:
        try:
            transport = state.replace_transport(error)
        except OSError as exc:
            notes.append(("reconnect_failed", {"error": repr(exc), "cause": repr(error)}, None))
            return False
        address = transport.address
        notes.append(("reconnected", {"address": str(address) if address is not None else None}, None))
        return True

    def _emit_notes(self, notes: list[_Note]) -> None:
        for name, payload, exc in notes:
            LOGGER.log(_DIAGNOSTIC_LEVELS.get(name, logging.INFO), "syslog writer %s: %s", name, payload, exc_info=exc)
            self._emit_diagnostic(name, payload)

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Syslog diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


__all__ = ["DEFAULT_CAPACITY", "BufferOverflowStrategy", "DiagnosticHook", "LogWriter"]
