"""BSD syslog (RFC 3164) formatter.

Renders ``<PRI>Mmm dd hh:mm:ss HOST TAG[PID]: MSG`` for collectors that still
expect the classic format. Structured data and msg ids have no place in this
format and are ignored.
"""

from __future__ import annotations

from typing import Any

from lib_log_syslog.application.ports.formatter import FormatterPort
from lib_log_syslog.application.ports.time import ClockPort
from lib_log_syslog.domain.bounded import ByteSink
from lib_log_syslog.domain.errors import SyslogFormatError
from lib_log_syslog.domain.severity import Facility, Severity, encode_priority
from lib_log_syslog.domain.structured_data import StructuredData

from ..clock import SystemClock
from ._identity import APP_NAME_MAX, HOSTNAME_MAX, PROCID_MAX, TimestampPolicy, apply_policy, header_field

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class Rfc3164Formatter(FormatterPort):
    """Render BSD syslog lines.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_syslog.domain.bounded import ByteBuffer
    >>> class FixedClock:
    ...     def now(self):
    ...         return datetime(2024, 5, 1, 9, 5, 7, tzinfo=timezone.utc)
    >>> formatter = Rfc3164Formatter(facility="local0", hostname="web1", app_name="demo", process_id=7, clock=FixedClock())
    >>> buf = ByteBuffer(128)
    >>> formatter.format(buf, Severity.ERROR, "disk full")
    >>> buf.getvalue().decode()
    '<131>May  1 09:05:07 web1 demo[7]: disk full'
    """

    def __init__(
        self,
        *,
        facility: Facility | str = Facility.USER,
        hostname: str | None = None,
        app_name: str | None = None,
        process_id: int | str | None = None,
        timestamp: TimestampPolicy | str = TimestampPolicy.UTC,
        clock: ClockPort | None = None,
    ) -> None:
        self._facility = facility if isinstance(facility, Facility) else Facility.from_name(facility)
        self._hostname = header_field(hostname, "hostname", HOSTNAME_MAX) or "localhost"
        app = header_field(app_name, "app_name", APP_NAME_MAX) or "-"
        pid = header_field(process_id, "process_id", PROCID_MAX)
        self._tag = f"{app}[{pid}]" if pid else app
        self._timestamp = TimestampPolicy.from_name(timestamp)
        self._clock = clock or SystemClock()

    def format(
        self,
        sink: ByteSink,
        severity: Severity,
        message: Any,
        structured_data: StructuredData | None = None,
        msg_id: str | None = None,
    ) -> None:
        try:
            moment = apply_policy(self._clock.now(), self._timestamp)
            stamp = f"{_MONTHS[moment.month - 1]} {moment.day:>2} {moment:%H:%M:%S}"
            header = f"<{encode_priority(self._facility, severity)}>{stamp} {self._hostname} {self._tag}: "
            body = str(message)
            sink.write(header.encode("ascii"))
            sink.write(body.encode("utf-8", errors="replace"))
        except Exception as exc:
            raise SyslogFormatError(f"failed to render syslog message: {exc}") from exc


__all__ = ["Rfc3164Formatter"]
