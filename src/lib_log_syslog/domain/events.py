"""Log record handed to the syslog writer.

Purpose
-------
Provide the immutable, short-lived value a producer passes to
:meth:`LogWriter.write_record`. The message stays unrendered until the
formatter asks for it, so records filtered or dropped early cost nothing.

System Role
-----------
Sits in the domain layer; adapters (stdlib logging bridge, runtime proxy)
build records, the application layer consumes them read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .levels import LogLevel
from .structured_data import StructuredData


@dataclass(slots=True, frozen=True)
class LogRecord:
    """One log record, alive for the duration of a single write call.

    Attributes
    ----------
    level:
        :class:`LogLevel` the producer logged at.
    message:
        Any object; rendered with ``str()`` at format time.
    structured_data:
        Optional ``{sd_id: {param: value}}`` mapping for RFC 5424 output.
    msg_id:
        Optional RFC 5424 MSGID overriding the formatter default.
    logger_name:
        Logical logger that produced the record, kept for diagnostics.
    """

    level: LogLevel
    message: Any
    structured_data: StructuredData | None = None
    msg_id: str | None = None
    logger_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def render_message(self) -> str:
        """Return the message text.

        Examples
        --------
        >>> LogRecord(LogLevel.INFO, 42).render_message()
        '42'
        """

        return str(self.message)

    def replace(self, **changes: Any) -> "LogRecord":
        """Return a copied record with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogRecord"]
