"""Port for syslog wire-format renderers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from lib_log_syslog.domain.bounded import ByteSink
from lib_log_syslog.domain.severity import Severity
from lib_log_syslog.domain.structured_data import StructuredData


@runtime_checkable
class FormatterPort(Protocol):
    """Render one syslog line (without terminator) into ``sink``."""

    def format(
        self,
        sink: ByteSink,
        severity: Severity,
        message: Any,
        structured_data: StructuredData | None = None,
        msg_id: str | None = None,
    ) -> None:
        """Write the encoded line to ``sink``; raise ``SyslogFormatError`` on failure."""


__all__ = ["FormatterPort"]
