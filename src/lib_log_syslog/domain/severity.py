"""Syslog severities, facilities, and priority encoding.

Purpose
-------
Model the syslog-side vocabulary (RFC 5424 section 6.2.1) separately from the
application's :class:`~lib_log_syslog.domain.levels.LogLevel`.

Contents
--------
* :class:`Severity` - syslog urgency levels, ``EMERGENCY`` (0) to ``DEBUG`` (7).
* :class:`Facility` - facility codes, already shifted left by three bits.
* :func:`encode_priority` - combine both into the ``<PRI>`` value.
* :func:`default_level_mapping` and :func:`ensure_total_mapping`.

System Role
-----------
Formatters call :func:`encode_priority`; the log writer validates its
level-to-severity mapping once at construction via :func:`ensure_total_mapping`.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

from .levels import LogLevel


class Severity(IntEnum):
    """Syslog severity codes."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        normalized = name.strip().upper().removeprefix("LOG_")
        normalized = _SEVERITY_ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown syslog severity: {name!r}") from exc


_SEVERITY_ALIASES = {
    "EMERG": "EMERGENCY",
    "CRIT": "CRITICAL",
    "ERR": "ERROR",
    "WARN": "WARNING",
}


class Facility(IntEnum):
    """Syslog facility codes, pre-shifted so ``facility | severity`` is the priority."""

    KERN = 0 << 3
    USER = 1 << 3
    MAIL = 2 << 3
    DAEMON = 3 << 3
    AUTH = 4 << 3
    SYSLOG = 5 << 3
    LPR = 6 << 3
    NEWS = 7 << 3
    UUCP = 8 << 3
    CRON = 9 << 3
    AUTHPRIV = 10 << 3
    FTP = 11 << 3
    NTP = 12 << 3
    AUDIT = 13 << 3
    ALERT = 14 << 3
    CLOCK = 15 << 3
    LOCAL0 = 16 << 3
    LOCAL1 = 17 << 3
    LOCAL2 = 18 << 3
    LOCAL3 = 19 << 3
    LOCAL4 = 20 << 3
    LOCAL5 = 21 << 3
    LOCAL6 = 22 << 3
    LOCAL7 = 23 << 3

    @property
    def code(self) -> int:
        """Return the unshifted RFC 5424 facility number."""

        return self.value >> 3

    @classmethod
    def from_name(cls, name: str) -> "Facility":
        """Resolve ``local0``, ``LOCAL0`` or ``LOG_LOCAL0`` style names.

        Examples
        --------
        >>> Facility.from_name("log_local0") is Facility.LOCAL0
        True
        >>> Facility.from_name("kernel") is Facility.KERN
        True
        """
        normalized = name.strip().upper().removeprefix("LOG_")
        if normalized == "KERNEL":
            normalized = "KERN"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown syslog facility: {name!r}") from exc


LevelToSeverity = Callable[[LogLevel], Severity]
"""Caller-supplied mapping from :class:`LogLevel` to :class:`Severity`."""


def encode_priority(facility: Facility, severity: Severity) -> int:
    """Return the numeric syslog priority for ``facility`` and ``severity``.

    Examples
    --------
    >>> encode_priority(Facility.USER, Severity.INFO)
    14
    >>> encode_priority(Facility.LOCAL0, Severity.ERROR)
    131
    """

    return int(facility) | int(severity)


_DEFAULT_SEVERITY = {
    LogLevel.CRITICAL: Severity.CRITICAL,
    LogLevel.ERROR: Severity.ERROR,
    LogLevel.WARNING: Severity.WARNING,
    LogLevel.INFO: Severity.INFO,
    LogLevel.DEBUG: Severity.DEBUG,
    LogLevel.TRACE: Severity.DEBUG,
}


def default_level_mapping(level: LogLevel) -> Severity:
    """Map application levels onto syslog severities; DEBUG and TRACE share ``DEBUG``."""

    return _DEFAULT_SEVERITY[level]


def ensure_total_mapping(mapping: LevelToSeverity) -> LevelToSeverity:
    """Return ``mapping`` after checking it maps every :class:`LogLevel` to a :class:`Severity`.

    Raises
    ------
    ValueError
        When a level raises inside the mapping or maps to something else.
    """

    for level in LogLevel:
        try:
            severity = mapping(level)
        except Exception as exc:
            raise ValueError(f"level_to_severity does not handle {level.name}") from exc
        if not isinstance(severity, Severity):
            raise ValueError(f"level_to_severity mapped {level.name} to {severity!r}, expected a Severity")
    return mapping


__all__ = [
    "Facility",
    "LevelToSeverity",
    "Severity",
    "default_level_mapping",
    "encode_priority",
    "ensure_total_mapping",
]
