"""Runtime state container and access helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock

from lib_log_syslog.adapters.logging_handler import LogWriterHandler
from lib_log_syslog.application.use_cases.log_writer import LogWriter
from lib_log_syslog.config import SyslogConfig


@dataclass(slots=True)
class SyslogRuntime:
    """Aggregate of live collaborators assembled by the composition root."""

    writer: LogWriter
    config: SyslogConfig
    handlers: list[tuple[logging.Logger, LogWriterHandler]] = field(default_factory=list)


_STATE: SyslogRuntime | None = None
_STATE_LOCK = RLock()


def set_runtime(runtime: SyslogRuntime) -> None:
    """Install ``runtime`` as the active singleton."""

    with _STATE_LOCK:
        global _STATE
        _STATE = runtime


def clear_runtime() -> None:
    """Remove the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        _STATE = None


def current_runtime() -> SyslogRuntime:
    """Return the active runtime or raise when uninitialised."""

    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("lib_log_syslog.init() must be called before using the logging API")
        return _STATE


def is_initialised() -> bool:
    """Return ``True`` when :func:`lib_log_syslog.init` has been called."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "SyslogRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
