"""Bridge from the stdlib :mod:`logging` tree into a syslog writer.

Attach :class:`LogWriterHandler` to any logger to forward its records. The
handler's formatter renders the message text; ``extra={"structured_data":
..., "msg_id": ...}`` on the logging call reaches the RFC 5424 fields.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from lib_log_syslog.domain.events import LogRecord
from lib_log_syslog.domain.levels import LogLevel

PACKAGE_LOGGER = "lib_log_syslog"


class RecordWriter(Protocol):
    """Writer accepting :class:`LogRecord` values (socket or system writer)."""

    def enabled(self, level: LogLevel) -> bool: ...

    def write_record(self, record: LogRecord) -> dict[str, Any]: ...


class LogWriterHandler(logging.Handler):
    """:class:`logging.Handler` shipping records through a syslog writer.

    Records from this package's own loggers are skipped, as are records logged
    while the handler is already emitting on the same thread, so writer
    diagnostics never loop back into the writer.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.records = []
    ...     def enabled(self, level):
    ...         return True
    ...     def write_record(self, record):
    ...         self.records.append(record)
    ...         return {"ok": True}
    >>> writer = Recorder()
    >>> logger = logging.getLogger("doctest.bridge")
    >>> logger.propagate = False
    >>> handler = LogWriterHandler(writer)
    >>> logger.addHandler(handler)
    >>> logger.warning("disk %s", "low")
    >>> writer.records[0].level, writer.records[0].message
    (<LogLevel.WARNING: 30>, 'disk low')
    >>> logger.removeHandler(handler)
    """

    def __init__(self, writer: RecordWriter, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._writer = writer
        self._local = threading.local()

    @property
    def writer(self) -> RecordWriter:
        return self._writer

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == PACKAGE_LOGGER or record.name.startswith(PACKAGE_LOGGER + "."):
            return
        if getattr(self._local, "active", False):
            return
        self._local.active = True
        try:
            level = LogLevel.from_python_level(record.levelno)
            if not self._writer.enabled(level):
                return
            self._writer.write_record(
                LogRecord(
                    level=level,
                    message=self.format(record),
                    structured_data=getattr(record, "structured_data", None),
                    msg_id=getattr(record, "msg_id", None),
                    logger_name=record.name,
                )
            )
        except Exception:  # noqa: BLE001
            self.handleError(record)
        finally:
            self._local.active = False


__all__ = ["LogWriterHandler", "RecordWriter"]
