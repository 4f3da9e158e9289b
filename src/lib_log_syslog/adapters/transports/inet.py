"""Network transports to remote syslog collectors.

UDP sends one datagram per message (RFC 5426). TCP frames each message per
RFC 6587, either with octet counting (``"42 <14>1 ..."``, the default) or with
a trailing newline for collectors that only understand non-transparent framing.
"""

from __future__ import annotations

import socket
from enum import Enum

from lib_log_syslog.application.ports.transport import TransportPort
from lib_log_syslog.domain.address import TransportAddress, TransportKind


class TcpFraming(str, Enum):
    """RFC 6587 framing methods."""

    OCTET_COUNTING = "octet-counting"
    NON_TRANSPARENT = "non-transparent"

    @classmethod
    def from_name(cls, name: "str | TcpFraming") -> "TcpFraming":
        if isinstance(name, TcpFraming):
            return name
        normalized = name.strip().lower().replace("_", "-")
        if normalized == "newline":
            normalized = cls.NON_TRANSPARENT.value
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"tcp framing must be 'octet-counting' or 'non-transparent', got {name!r}") from exc

    def frame(self, data: bytes) -> bytes:
        """Return ``data`` with this framing applied.

        Examples
        --------
        >>> TcpFraming.OCTET_COUNTING.frame(b"<14>1 hi")
        b'8 <14>1 hi'
        >>> TcpFraming.NON_TRANSPARENT.frame(b"<14>1 hi")
        b'<14>1 hi\\n'
        """
        if self is TcpFraming.OCTET_COUNTING:
            return str(len(data)).encode("ascii") + b" " + data
        return data + b"\n"


class UdpTransport(TransportPort):
    """Send each message as one UDP datagram on a connected socket."""

    def __init__(self, sock: socket.socket, address: TransportAddress | None = None) -> None:
        self._sock = sock
        self._address = address

    @classmethod
    def connect(cls, host: str, port: int, *, timeout: float | None = None) -> "UdpTransport":
        address = TransportAddress(kind=TransportKind.UDP, host=host, port=port)
        family, sock_type, proto, _canon, sockaddr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
        sock = socket.socket(family, sock_type, proto)
        try:
            sock.settimeout(timeout)
            sock.connect(sockaddr)
        except OSError:
            sock.close()
            raise
        return cls(sock, address)

    @property
    def address(self) -> TransportAddress | None:
        return self._address

    def send(self, data: bytes) -> int:
        return self._sock.send(data)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self._sock.close()


class TcpTransport(TransportPort):
    """Stream framed messages to a TCP collector."""

    def __init__(
        self,
        sock: socket.socket,
        address: TransportAddress | None = None,
        *,
        framing: TcpFraming | str = TcpFraming.OCTET_COUNTING,
    ) -> None:
        self._sock = sock
        self._address = address
        self._framing = TcpFraming.from_name(framing)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        *,
        timeout: float | None = None,
        framing: TcpFraming | str = TcpFraming.OCTET_COUNTING,
    ) -> "TcpTransport":
        address = TransportAddress(kind=TransportKind.TCP, host=host, port=port)
        sock = socket.create_connection((host, port), timeout=timeout)
        return cls(sock, address, framing=framing)

    @property
    def address(self) -> TransportAddress | None:
        return self._address

    @property
    def framing(self) -> TcpFraming:
        return self._framing

    def send(self, data: bytes) -> int:
        self._sock.sendall(self._framing.frame(data))
        return len(data)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self._sock.close()


__all__ = ["TcpFraming", "TcpTransport", "UdpTransport"]
