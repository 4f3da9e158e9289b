"""RFC 5424 formatter implementing :class:`FormatterPort`.

Purpose
-------
Render ``<PRI>1 TIMESTAMP HOST APP PROCID MSGID SD MSG`` lines, the format the
log writer ships by default.

Contents
--------
* :class:`Rfc5424Formatter` - identity fixed at construction, timestamp taken
  per message from an injectable clock.

System Role
-----------
Writes into the bounded sink in several calls (header, structured data,
message), so truncation lands in the message body unless the header itself
exceeds the budget.
"""

from __future__ import annotations

from typing import Any

from lib_log_syslog.application.ports.formatter import FormatterPort
from lib_log_syslog.application.ports.time import ClockPort
from lib_log_syslog.domain.bounded import ByteSink
from lib_log_syslog.domain.errors import SyslogFormatError
from lib_log_syslog.domain.severity import Facility, Severity, encode_priority
from lib_log_syslog.domain.structured_data import StructuredData, render_structured_data

from ..clock import SystemClock
from ._identity import (
    APP_NAME_MAX,
    HOSTNAME_MAX,
    MSGID_MAX,
    NILVALUE,
    PROCID_MAX,
    TimestampPolicy,
    header_field,
    render_rfc3339,
)

VERSION = "1"
DEFAULT_HOSTNAME = "localhost"


class Rfc5424Formatter(FormatterPort):
    """Render syslog protocol (RFC 5424) lines without a trailing newline."""

    def __init__(
        self,
        *,
        facility: Facility | str = Facility.USER,
        hostname: str | None = None,
        app_name: str | None = None,
        process_id: int | str | None = None,
        msg_id: str | None = None,
        timestamp: TimestampPolicy | str = TimestampPolicy.UTC,
        clock: ClockPort | None = None,
    ) -> None:
        """Fix the identity rendered in every header.

        Raises
        ------
        ValueError
            When an identity field is not printable US-ASCII or too long.
        """
        self._facility = facility if isinstance(facility, Facility) else Facility.from_name(facility)
        self._hostname = header_field(hostname, "hostname", HOSTNAME_MAX) or DEFAULT_HOSTNAME
        self._app_name = header_field(app_name, "app_name", APP_NAME_MAX) or NILVALUE
        self._process_id = header_field(process_id, "process_id", PROCID_MAX) or NILVALUE
        self._msg_id = header_field(msg_id, "msg_id", MSGID_MAX) or NILVALUE
        self._timestamp = TimestampPolicy.from_name(timestamp)
        self._clock = clock or SystemClock()

    @property
    def facility(self) -> Facility:
        return self._facility

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def app_name(self) -> str:
        return self._app_name

    def format(
        self,
        sink: ByteSink,
        severity: Severity,
        message: Any,
        structured_data: StructuredData | None = None,
        msg_id: str | None = None,
    ) -> None:
        """Write one RFC 5424 line for ``message`` into ``sink``.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> from lib_log_syslog.domain.bounded import ByteBuffer
        >>> class FixedClock:
        ...     def now(self):
        ...         return datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        >>> formatter = Rfc5424Formatter(hostname="app.example", app_name="demo", process_id=42, clock=FixedClock())
        >>> buf = ByteBuffer(256)
        >>> formatter.format(buf, Severity.INFO, "hello")
        >>> buf.getvalue().decode()
        '<14>1 2024-05-01T12:00:00.123456Z app.example demo 42 - - hello'
        """
        try:
            effective_msg_id = self._msg_id
            if msg_id is not None:
                effective_msg_id = self._validate_msg_id(msg_id)
            sd = render_structured_data(structured_data)
            header = (
                f"<{encode_priority(self._facility, severity)}>{VERSION} "
                f"{render_rfc3339(self._clock.now(), self._timestamp)} "
                f"{self._hostname} {self._app_name} {self._process_id} {effective_msg_id} "
            )
            body = str(message)
            sink.write(header.encode("ascii"))
            sink.write(sd.encode("utf-8", errors="replace"))
            sink.write(b" ")
            sink.write(body.encode("utf-8", errors="replace"))
        except SyslogFormatError:
            raise
        except Exception as exc:
            raise SyslogFormatError(f"failed to render syslog message: {exc}") from exc

    @staticmethod
    def _validate_msg_id(msg_id: str) -> str:
        try:
            return header_field(msg_id, "msg_id", MSGID_MAX) or NILVALUE
        except ValueError as exc:
            raise SyslogFormatError(str(exc)) from exc


__all__ = ["DEFAULT_HOSTNAME", "Rfc5424Formatter", "VERSION"]
