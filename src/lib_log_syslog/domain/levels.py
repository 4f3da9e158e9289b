"""Application log levels consumed by the syslog writer.

Purpose
-------
Offer the level enum host code logs with, independent of the syslog
:class:`~lib_log_syslog.domain.severity.Severity` scale it is mapped onto.

Contents
--------
* :class:`LogLevel` enum with conversion helpers and the minimum-level gate.

System Role
-----------
Used by the runtime proxy and the stdlib logging bridge to gate records before
they reach :class:`~lib_log_syslog.application.use_cases.log_writer.LogWriter`,
and by level-to-severity mappings as their input domain.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels used throughout the system."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @property
    def severity(self) -> str:
        """Return the lowercase level name used in diagnostics."""

        return self.name.lower()

    def allows(self, level: "LogLevel") -> bool:
        """Return ``True`` when ``level`` passes a gate set at ``self``.

        Examples
        --------
        >>> LogLevel.INFO.allows(LogLevel.ERROR)
        True
        >>> LogLevel.INFO.allows(LogLevel.TRACE)
        False
        """

        return level.value >= self.value

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this level."""

        if self is LogLevel.TRACE:
            return self.value
        return getattr(logging, self.name)

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging level integer into :class:`LogLevel`.

        Custom numeric levels round down to the closest defined level so
        ``logging.addLevelName(25, "NOTICE")`` records still map somewhere.

        Examples
        --------
        >>> LogLevel.from_python_level(logging.WARNING)
        <LogLevel.WARNING: 30>
        >>> LogLevel.from_python_level(25)
        <LogLevel.INFO: 20>
        >>> LogLevel.from_python_level(0)
        <LogLevel.TRACE: 5>
        """
        candidates = [member for member in cls if member.value <= level]
        if not candidates:
            return cls.TRACE
        return max(candidates, key=lambda member: member.value)

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` corresponding exactly to ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc


def coerce_level(level: str | LogLevel) -> LogLevel:
    """Normalise level inputs (string or enum) into :class:`LogLevel`.

    Examples
    --------
    >>> coerce_level("warning") is LogLevel.WARNING
    True
    >>> coerce_level(LogLevel.ERROR) is LogLevel.ERROR
    True
    """
    if isinstance(level, LogLevel):
        return level
    return LogLevel.from_name(level)


__all__ = ["LogLevel", "coerce_level"]
