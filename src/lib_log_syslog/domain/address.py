"""Transport endpoint value objects.

An address is resolved once when a writer is configured and reused verbatim by
reconnection strategies, so it lives in the domain as an immutable value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TransportKind(str, Enum):
    """Closed set of supported transports."""

    UNIX_DATAGRAM = "unix"
    UNIX_STREAM = "unix-stream"
    UDP = "udp"
    TCP = "tcp"

    @property
    def is_unix(self) -> bool:
        return self in (TransportKind.UNIX_DATAGRAM, TransportKind.UNIX_STREAM)

    @classmethod
    def from_name(cls, name: str) -> "TransportKind":
        normalized = name.strip().lower().replace("_", "-")
        normalized = _KIND_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown syslog transport: {name!r}") from exc


_KIND_ALIASES = {
    "unix-datagram": "unix",
    "unix-dgram": "unix",
}


DEFAULT_PORTS = {
    TransportKind.UDP: 514,
    TransportKind.TCP: 601,
}


@dataclass(slots=True, frozen=True)
class TransportAddress:
    """Where a transport connects: a socket path or a host/port pair."""

    kind: TransportKind
    path: str | None = None
    host: str | None = None
    port: int | None = None

    def __post_init__(self) -> None:
        if self.kind.is_unix:
            if not self.path:
                raise ValueError(f"{self.kind.value} transport requires a socket path")
            return
        if not self.host:
            raise ValueError(f"{self.kind.value} transport requires a host")
        if self.port is None or not 0 < self.port < 65536:
            raise ValueError(f"{self.kind.value} port must be positive and below 65536")

    @classmethod
    def parse(cls, kind: TransportKind | str, raw: str) -> "TransportAddress":
        """Build an address from a path (unix kinds) or ``HOST:PORT`` (inet kinds).

        A bare host uses the conventional port (514 for UDP, 601 for TCP).
        IPv6 hosts take a port only in the bracketed ``[HOST]:PORT`` form; an
        unbracketed value with several colons is a host on the default port.

        Examples
        --------
        >>> TransportAddress.parse("udp", "collector.local:1514").port
        1514
        >>> TransportAddress.parse("tcp", "collector.local").port
        601
        >>> TransportAddress.parse("unix", "/dev/log").path
        '/dev/log'
        >>> str(TransportAddress.parse("udp", "::1"))
        'udp://[::1]:514'
        """
        resolved = kind if isinstance(kind, TransportKind) else TransportKind.from_name(kind)
        value = raw.strip()
        if resolved.is_unix:
            return cls(kind=resolved, path=value)
        if value.startswith("["):
            host, closed, rest = value[1:].partition("]")
            if not closed or not host:
                raise ValueError(f"syslog address must use [HOST]:PORT format, got {raw!r}")
            if not rest:
                return cls(kind=resolved, host=host, port=DEFAULT_PORTS[resolved])
            if not rest.startswith(":"):
                raise ValueError(f"syslog address must use [HOST]:PORT format, got {raw!r}")
            return cls(kind=resolved, host=host, port=_parse_port(rest[1:]))
        if value.count(":") > 1:
            return cls(kind=resolved, host=value, port=DEFAULT_PORTS[resolved])
        host, separator, port_text = value.partition(":")
        if not separator:
            return cls(kind=resolved, host=value, port=DEFAULT_PORTS[resolved])
        if not host:
            raise ValueError(f"syslog address must use HOST:PORT format, got {raw!r}")
        return cls(kind=resolved, host=host, port=_parse_port(port_text))

    def __str__(self) -> str:
        if self.kind.is_unix:
            return f"{self.kind.value}://{self.path}"
        host = f"[{self.host}]" if self.host and ":" in self.host else self.host
        return f"{self.kind.value}://{host}:{self.port}"


def _parse_port(text: str) -> int:
    try:
        port = int(text)
    except ValueError as exc:
        raise ValueError(f"syslog port must be an integer, got {text!r}") from exc
    if port <= 0:
        raise ValueError(f"syslog port must be positive, got {port}")
    return port


__all__ = ["DEFAULT_PORTS", "TransportAddress", "TransportKind"]
