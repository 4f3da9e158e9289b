"""Runtime façade exposing one process-wide syslog writer.

Purpose
-------
Give host applications a stable entry point (``init``, ``get``, ``flush``,
``shutdown``) instead of wiring formatters, transports, and reconnection
strategies by hand.

Contents
--------
* ``init`` - composition root installing the singleton writer.
* ``get`` - logger proxies gated on the configured level.
* ``flush`` / ``shutdown`` - deterministic teardown.
* ``inspect_runtime`` - read-only snapshot for diagnostics and the CLI.
* ``attach_logging_handler`` - bridge for stdlib :mod:`logging` users.

System Role
-----------
Outer shell of the clean-architecture layering: only this package and the CLI
know which concrete adapters are in play.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from lib_log_syslog.adapters.logging_handler import LogWriterHandler
from lib_log_syslog.application.ports import ClockPort, TransportPort
from lib_log_syslog.application.use_cases.log_writer import DiagnosticHook
from lib_log_syslog.config import SyslogConfig, load_config
from lib_log_syslog.domain.levels import LogLevel

from ._composition import LoggerProxy, build_writer
from ._state import SyslogRuntime, clear_runtime, current_runtime, is_initialised, set_runtime

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active syslog runtime."""

    transport: str
    address: str | None
    connected: bool
    level: LogLevel
    max_bytes: int
    overflow: str
    reconnect: str
    format: str
    handlers: int


def init(
    config: SyslogConfig | None = None,
    *,
    transport: TransportPort | None = None,
    clock: ClockPort | None = None,
    diagnostic_hook: DiagnosticHook = None,
    **overrides: Any,
) -> None:
    """Build the syslog writer and install it as the process singleton.

    Inputs
    ------
    config:
        Pre-resolved configuration; when omitted it is loaded through
        :func:`lib_log_syslog.config.load_config` with ``overrides``.
    transport:
        Pre-connected transport used instead of connecting from configuration.
    clock, diagnostic_hook:
        Optional collaborators forwarded to the formatter and writer.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called while a runtime is already active.
    Opens the configured transport; when it cannot be reached yet, the first
    write reconnects.
    """

    if is_initialised():
        raise RuntimeError(
            "lib_log_syslog.init() cannot be called twice without shutdown(); call lib_log_syslog.shutdown() first",
        )
    if config is not None and overrides:
        raise ValueError("pass either a SyslogConfig or keyword overrides, not both")
    resolved = config if config is not None else load_config(**overrides)
    writer = build_writer(resolved, transport=transport, clock=clock, diagnostic=diagnostic_hook)
    set_runtime(SyslogRuntime(writer=writer, config=resolved))


def get(name: str) -> LoggerProxy:
    """Return a logger proxy bound to the configured writer.

    Raises :class:`RuntimeError` when ``init`` has not been called.
    """

    return LoggerProxy(name, current_runtime().writer)


def flush() -> None:
    """Flush the writer's transport.

    Raises
    ------
    TransportUnavailableError
        No transport is connected.
    """

    current_runtime().writer.flush()


def attach_logging_handler(logger: logging.Logger | str | None = None, level: int = logging.NOTSET) -> LogWriterHandler:
    """Attach a :class:`LogWriterHandler` to ``logger`` (the root logger by default).

    The handler is removed again by :func:`shutdown`.
    """

    runtime = current_runtime()
    target = logger if isinstance(logger, logging.Logger) else logging.getLogger(logger)
    handler = LogWriterHandler(runtime.writer, level=level)
    target.addHandler(handler)
    runtime.handlers.append((target, handler))
    return handler


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    config = runtime.config
    writer = runtime.writer
    summary = config.to_dict()
    return RuntimeSnapshot(
        transport=summary["transport"],
        address=summary["address"],
        connected=writer.connected,
        level=writer.max_log_level,
        max_bytes=writer.capacity,
        overflow=writer.overflow.value,
        reconnect=summary["reconnect"],
        format=summary["format"],
        handlers=len(runtime.handlers),
    )


def shutdown() -> None:
    """Detach logging handlers, flush best effort, close the transport, and clear state.

    Raises :class:`RuntimeError` when no runtime is active.
    """

    runtime = current_runtime()
    for target, handler in runtime.handlers:
        target.removeHandler(handler)
    runtime.handlers.clear()
    try:
        runtime.writer.flush()
    except OSError as exc:
        LOGGER.debug("flush during shutdown failed: %s", exc)
    try:
        runtime.writer.close()
    finally:
        clear_runtime()


__all__ = [
    "LoggerProxy",
    "RuntimeSnapshot",
    "attach_logging_handler",
    "flush",
    "get",
    "init",
    "inspect_runtime",
    "is_initialised",
    "shutdown",
]
