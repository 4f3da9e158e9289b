"""Configuration loading for the syslog writer.

Purpose
-------
Resolve a :class:`SyslogConfig` from explicit arguments, ``LOG_SYSLOG_*``
environment variables, and defaults, optionally seeding the environment from
the nearest ``.env`` file first.

Contents
--------
* :func:`enable_dotenv` / :func:`should_use_dotenv` - ``.env`` support via
  python-dotenv.
* :class:`SyslogConfig` and :func:`load_config`.
* :func:`exe_name_from_env` - default application name.

System Role
-----------
Consumed by :func:`lib_log_syslog.runtime.init` and the CLI. Every validation
error surfaces as :class:`ValueError` before any socket is opened.

Alignment Notes
---------------
Precedence is explicit argument, then environment variable, then default.
``.env`` entries never override variables already present in the process
environment.
"""

from __future__ import annotations

import os
import socket
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping

from dotenv import find_dotenv, load_dotenv

from lib_log_syslog.adapters.formatters import TimestampPolicy
from lib_log_syslog.adapters.formatters._identity import APP_NAME_MAX
from lib_log_syslog.adapters.transports import TcpFraming
from lib_log_syslog.application.use_cases.log_writer import DEFAULT_CAPACITY, BufferOverflowStrategy
from lib_log_syslog.domain.address import TransportAddress, TransportKind
from lib_log_syslog.domain.levels import LogLevel, coerce_level
from lib_log_syslog.domain.severity import Facility

ENV_PREFIX = "LOG_SYSLOG_"
DOTENV_ENV_VAR = "LOG_SYSLOG_USE_DOTENV"
DEFAULT_UNIX_SOCKET = "/dev/log"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})

_DOTENV_LOCK = threading.Lock()
_DOTENV_ATTEMPTED = False
_DOTENV_PATH: Path | None = None


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` (searching upward from the working directory).

    Existing environment variables keep precedence. The search runs once per
    process; later calls return the cached result.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """

    global _DOTENV_ATTEMPTED, _DOTENV_PATH
    with _DOTENV_LOCK:
        if _DOTENV_ATTEMPTED:
            return _DOTENV_PATH
        _DOTENV_ATTEMPTED = True
        found = find_dotenv(usecwd=True)
        if not found:
            return None
        path = Path(found).resolve()
        load_dotenv(path, override=False)
        _DOTENV_PATH = path
        return path


def should_use_dotenv(explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether to load ``.env``; an explicit flag beats the environment toggle.

    Examples
    --------
    >>> should_use_dotenv(True, "0")
    True
    >>> should_use_dotenv(None, "yes")
    True
    >>> should_use_dotenv(None, None)
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_ATTEMPTED, _DOTENV_PATH
    with _DOTENV_LOCK:
        _DOTENV_ATTEMPTED = False
        _DOTENV_PATH = None


def exe_name_from_env() -> str:
    """Return the file name of the running program.

    Uses the script in ``sys.argv[0]`` and falls back to the interpreter
    executable for ``python -c`` and embedded interpreters.

    Raises
    ------
    OSError
        When neither path has a file name.
    """

    for candidate in (sys.argv[0] if sys.argv else "", sys.executable or ""):
        if candidate in ("", "-c", "-m"):
            continue
        name = Path(candidate).name
        if name:
            return name
    raise OSError("exe path has no filename")


def _default_app_name() -> str:
    try:
        raw = exe_name_from_env()
    except OSError:
        return "python"
    cleaned = "".join(ch if 33 <= ord(ch) <= 126 else "_" for ch in raw)
    return cleaned[:APP_NAME_MAX] or "python"


def _default_hostname() -> str | None:
    name = socket.gethostname()
    if not name or any(not 33 <= ord(ch) <= 126 for ch in name):
        return None
    return name


class ReconnectMode(str, Enum):
    """Reconnection strategy selectable from configuration."""

    ACQUIRE_SAME = "acquire-same"
    GIVE_UP = "give-up"
    PROBE = "probe"

    @classmethod
    def from_name(cls, name: "str | ReconnectMode") -> "ReconnectMode":
        if isinstance(name, ReconnectMode):
            return name
        try:
            return cls(name.strip().lower().replace("_", "-"))
        except ValueError as exc:
            raise ValueError(f"reconnect must be one of acquire-same, give-up, probe; got {name!r}") from exc


class MessageFormat(str, Enum):
    """Wire format rendered by the writer."""

    RFC5424 = "rfc5424"
    RFC3164 = "rfc3164"

    @classmethod
    def from_name(cls, name: "str | MessageFormat") -> "MessageFormat":
        if isinstance(name, MessageFormat):
            return name
        normalized = name.strip().lower().replace("-", "").replace("_", "")
        aliases = {"5424": "rfc5424", "3164": "rfc3164", "bsd": "rfc3164"}
        try:
            return cls(aliases.get(normalized, normalized))
        except ValueError as exc:
            raise ValueError(f"format must be 'rfc5424' or 'rfc3164', got {name!r}") from exc


@dataclass(slots=True, frozen=True)
class SyslogConfig:
    """Resolved writer configuration.

    ``transport`` is ``None`` for automatic selection: the address decides the
    kind, and without an address the well-known local sockets are probed.
    """

    transport: TransportKind | None = None
    address: TransportAddress | None = None
    facility: Facility = Facility.USER
    hostname: str | None = None
    app_name: str | None = None
    process_id: int | str | None = None
    max_bytes: int = DEFAULT_CAPACITY
    level: LogLevel = LogLevel.INFO
    overflow: BufferOverflowStrategy = BufferOverflowStrategy.IGNORE
    reconnect: ReconnectMode = ReconnectMode.ACQUIRE_SAME
    timestamp: TimestampPolicy = TimestampPolicy.UTC
    format: MessageFormat = MessageFormat.RFC5424
    tcp_framing: TcpFraming = TcpFraming.OCTET_COUNTING
    timeout: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly summary used by the CLI and runtime snapshots."""

        return {
            "transport": self.transport.value if self.transport else "auto",
            "address": str(self.address) if self.address else None,
            "facility": self.facility.name.lower(),
            "hostname": self.hostname,
            "app_name": self.app_name,
            "process_id": self.process_id,
            "max_bytes": self.max_bytes,
            "level": self.level.name,
            "overflow": self.overflow.value,
            "reconnect": self.reconnect.value,
            "timestamp": self.timestamp.value,
            "format": self.format.value,
            "tcp_framing": self.tcp_framing.value,
            "timeout": self.timeout,
        }


def _parse_transport(raw: str | TransportKind | None) -> TransportKind | None:
    if raw is None or isinstance(raw, TransportKind):
        return raw
    if raw.strip().lower() in ("", "auto"):
        return None
    return TransportKind.from_name(raw)


def _parse_positive_int(name: str, raw: Any) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _parse_timeout(raw: Any) -> float | None:
    if raw is None or (isinstance(raw, str) and raw.strip().lower() in ("", "none")):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"timeout must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"timeout must be positive, got {value}")
    return value


def _parse_facility(raw: Facility | str) -> Facility:
    if isinstance(raw, Facility):
        return raw
    return Facility.from_name(raw)


def _resolve_address(kind: TransportKind | None, raw: TransportAddress | str | None) -> tuple[TransportKind | None, TransportAddress | None]:
    if raw is None:
        if kind is not None and kind.is_unix:
            return kind, TransportAddress(kind=kind, path=DEFAULT_UNIX_SOCKET)
        if kind is not None:
            raise ValueError(f"{kind.value} transport requires an address in HOST:PORT format")
        return None, None
    if isinstance(raw, TransportAddress):
        if kind is not None and kind is not raw.kind:
            raise ValueError(f"syslog transport {kind.value} does not match address {raw}")
        return raw.kind, raw
    text = raw.strip()
    if not text:
        return _resolve_address(kind, None)
    if kind is None:
        kind = TransportKind.UNIX_DATAGRAM if text.startswith("/") else TransportKind.UDP
    return kind, TransportAddress.parse(kind, text)


_FIELD_PARSERS: Mapping[str, Callable[[Any], Any]] = {
    "facility": _parse_facility,
    "max_bytes": lambda raw: _parse_positive_int("max_bytes", raw),
    "level": coerce_level,
    "overflow": BufferOverflowStrategy.from_name,
    "reconnect": ReconnectMode.from_name,
    "timestamp": TimestampPolicy.from_name,
    "format": MessageFormat.from_name,
    "tcp_framing": TcpFraming.from_name,
    "timeout": _parse_timeout,
}

_KNOWN_FIELDS = (
    "transport",
    "address",
    "facility",
    "hostname",
    "app_name",
    "process_id",
    "max_bytes",
    "level",
    "overflow",
    "reconnect",
    "timestamp",
    "format",
    "tcp_framing",
    "timeout",
)


def _lookup(name: str, overrides: Mapping[str, Any], environ: Mapping[str, str]) -> Any:
    value = overrides.get(name)
    if value is not None:
        return value
    return environ.get(ENV_PREFIX + name.upper())


def load_config(*, environ: Mapping[str, str] | None = None, **overrides: Any) -> SyslogConfig:
    """Resolve a :class:`SyslogConfig`.

    Parameters
    ----------
    environ:
        Environment to read ``LOG_SYSLOG_*`` variables from; defaults to
        :data:`os.environ`.
    **overrides:
        Field values that win over the environment. ``None`` means "not set".

    Raises
    ------
    ValueError
        Unknown field names or invalid values.

    Examples
    --------
    >>> config = load_config(environ={"LOG_SYSLOG_ADDRESS": "collector:1514"}, app_name="demo", process_id=7)
    >>> config.transport.value, config.address.port, config.app_name
    ('udp', 1514, 'demo')
    """

    unknown = sorted(set(overrides) - set(_KNOWN_FIELDS))
    if unknown:
        raise ValueError(f"Unknown syslog configuration fields: {', '.join(unknown)}")
    env = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    for name, parser in _FIELD_PARSERS.items():
        raw = _lookup(name, overrides, env)
        if raw is not None:
            values[name] = parser(raw)

    kind = _parse_transport(_lookup("transport", overrides, env))
    values["transport"], values["address"] = _resolve_address(kind, _lookup("address", overrides, env))

    hostname = _lookup("hostname", overrides, env)
    values["hostname"] = hostname if hostname is not None else _default_hostname()
    app_name = _lookup("app_name", overrides, env)
    values["app_name"] = app_name if app_name is not None else _default_app_name()
    process_id = _lookup("process_id", overrides, env)
    values["process_id"] = process_id if process_id is not None else os.getpid()
    return SyslogConfig(**values)


__all__ = [
    "DOTENV_ENV_VAR",
    "ENV_PREFIX",
    "MessageFormat",
    "ReconnectMode",
    "SyslogConfig",
    "enable_dotenv",
    "exe_name_from_env",
    "load_config",
    "should_use_dotenv",
]
