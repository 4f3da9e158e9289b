"""Writer delegating to the C library's ``syslog(3)`` through :mod:`syslog`.

Purpose
-------
Offer an alternative to the socket writer for hosts that prefer the libc
client: the C library owns the connection to the local daemon, formatting of
the header, and reconnection.

Contents
--------
* :class:`LogOption` - ``openlog`` option flags.
* :class:`SystemSyslogWriter` - opens the log once, sends one ``syslog`` call
  per record, closes it on :meth:`SystemSyslogWriter.close`.

System Role
-----------
Shares the level mapping and the UTF-8 safe :class:`MaxByteWriter` with the
socket writer so both enforce the same byte budget on message bodies.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Protocol

from lib_log_syslog.domain.bounded import ByteBuffer, MaxByteWriter
from lib_log_syslog.domain.errors import SyslogFormatError
from lib_log_syslog.domain.events import LogRecord
from lib_log_syslog.domain.levels import LogLevel, coerce_level
from lib_log_syslog.domain.severity import Facility, LevelToSeverity, default_level_mapping, ensure_total_mapping


class LogOption(IntFlag):
    """Flags accepted by ``openlog``.

    Examples
    --------
    >>> str(LogOption.PID | LogOption.CONS)
    'LOG_CONS | LOG_PID'
    >>> str(LogOption(0))
    ''
    """

    PID = 0x01
    CONS = 0x02
    ODELAY = 0x04
    NDELAY = 0x08
    NOWAIT = 0x10
    PERROR = 0x20

    def __str__(self) -> str:
        names = sorted(f"LOG_{member.name}" for member in type(self) if member.value & self.value == member.value)
        return " | ".join(names)


class SyslogBackend(Protocol):
    """Subset of the :mod:`syslog` module the writer calls."""

    def openlog(self, ident: str, logoption: int, facility: int) -> None: ...

    def syslog(self, priority: int, message: str) -> None: ...

    def closelog(self) -> None: ...


def _default_backend() -> Any:  # pragma: no cover - depends on platform
    """Return the stdlib :mod:`syslog` module, raising where it does not exist."""
    try:
        import syslog
    except ImportError as exc:  # pragma: no cover - executed only off POSIX
        raise RuntimeError("the syslog module is not available on this platform") from exc
    return syslog


class SystemSyslogWriter:
    """Send records through ``syslog(3)``.

    ``openlog`` is process global, so only one instance should be open at a
    time. Messages are cut at the first NUL (the C API cannot carry it) and,
    when ``max_bytes`` is set, bounded on a UTF-8 character boundary.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.calls = []
    ...     def openlog(self, ident, logoption, facility):
    ...         self.calls.append(("openlog", ident, logoption, facility))
    ...     def syslog(self, priority, message):
    ...         self.calls.append(("syslog", priority, message))
    ...     def closelog(self):
    ...         self.calls.append(("closelog",))
    >>> backend = Recorder()
    >>> with SystemSyslogWriter("demo", Facility.LOCAL0, LogOption.PID, backend=backend) as writer:
    ...     _ = writer.write(LogLevel.ERROR, "disk full")
    >>> backend.calls
    [('openlog', 'demo', 1, 128), ('syslog', 3, 'disk full'), ('closelog',)]
    """

    def __init__(
        self,
        ident: str,
        facility: Facility | str = Facility.USER,
        options: LogOption | int = LogOption(0),
        *,
        level_to_severity: LevelToSeverity = default_level_mapping,
        max_log_level: LogLevel | str = LogLevel.INFO,
        max_bytes: int | None = None,
        backend: SyslogBackend | None = None,
    ) -> None:
        if "\x00" in ident:
            raise ValueError("syslog ident must not contain NUL characters")
        if max_bytes is not None and max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        self._ident = ident
        self._facility = facility if isinstance(facility, Facility) else Facility.from_name(facility)
        self._options = LogOption(int(options))
        self._level_to_severity = ensure_total_mapping(level_to_severity)
        self._max_log_level = coerce_level(max_log_level)
        self._max_bytes = max_bytes
        self._backend = backend if backend is not None else _default_backend()
        self._backend.openlog(ident, int(self._options), int(self._facility))
        self._open = True

    @property
    def ident(self) -> str:
        return self._ident

    @property
    def options(self) -> LogOption:
        return self._options

    @property
    def max_log_level(self) -> LogLevel:
        return self._max_log_level

    def enabled(self, level: LogLevel | str) -> bool:
        return self._max_log_level.allows(coerce_level(level))

    def write(self, level: LogLevel | str, message: Any) -> dict[str, Any]:
        """Hand one message to ``syslog(3)``.

        Raises
        ------
        RuntimeError
            When called after :meth:`close`.
        SyslogFormatError
            When ``message`` cannot be converted to text.
        """
        if not self._open:
            raise RuntimeError("SystemSyslogWriter is closed")
        severity = self._level_to_severity(coerce_level(level))
        try:
            text = str(message).split("\x00", 1)[0]
        except Exception as exc:
            raise SyslogFormatError(f"failed to render syslog message: {exc}") from exc
        truncated = False
        if self._max_bytes is not None:
            encoded = text.encode("utf-8", errors="replace")
            buffer = ByteBuffer(self._max_bytes)
            sink = MaxByteWriter(buffer, self._max_bytes)
            sink.write(encoded)
            truncated = sink.overflowed
            if truncated:
                text = buffer.getvalue().decode("utf-8")
        self._backend.syslog(int(severity), text)
        return {"ok": True, "bytes": len(text.encode("utf-8", errors="replace")), "truncated": truncated}

    def write_record(self, record: LogRecord) -> dict[str, Any]:
        """Write ``record``; structured data and msg ids have no libc equivalent."""
        return self.write(record.level, record.message)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        if self._open:
            self._open = False
            self._backend.closelog()

    def __enter__(self) -> "SystemSyslogWriter":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


__all__ = ["LogOption", "SyslogBackend", "SystemSyslogWriter"]
