"""Unix domain socket transports for the local syslog daemon.

Purpose
-------
Reach ``/dev/log`` style endpoints either as datagrams (the common case) or
as a stream framed like ``syslog(3)`` does, with a trailing NUL per message.

Contents
--------
* :class:`UnixDatagramTransport` / :class:`UnixStreamTransport`.
* :data:`RECOMMENDED_SOCKET_PATHS` and :func:`connect_recommended`.
"""

from __future__ import annotations

import errno
import logging
import socket
from collections.abc import Sequence

from lib_log_syslog.application.ports.transport import TransportPort
from lib_log_syslog.domain.address import TransportAddress, TransportKind

LOGGER = logging.getLogger(__name__)

RECOMMENDED_SOCKET_PATHS: tuple[str, ...] = ("/dev/log", "/var/run/syslog", "/var/run/log")
"""Well-known local syslog sockets on Linux, macOS, and the BSDs, in probe order."""


def _connect_unix(path: str, sock_type: int, timeout: float | None) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, sock_type)
    try:
        sock.settimeout(timeout)
        sock.connect(path)
    except OSError:
        sock.close()
        raise
    return sock


class UnixDatagramTransport(TransportPort):
    """Send each message as one datagram on a connected ``AF_UNIX`` socket."""

    def __init__(self, sock: socket.socket, address: TransportAddress | None = None) -> None:
        """Wrap an already connected (or paired) datagram socket."""
        self._sock = sock
        self._address = address

    @classmethod
    def connect(cls, path: str, *, timeout: float | None = None) -> "UnixDatagramTransport":
        address = TransportAddress(kind=TransportKind.UNIX_DATAGRAM, path=path)
        return cls(_connect_unix(path, socket.SOCK_DGRAM, timeout), address)

    @property
    def address(self) -> TransportAddress | None:
        return self._address

    def send(self, data: bytes) -> int:
        return self._sock.send(data)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self._sock.close()


class UnixStreamTransport(TransportPort):
    """Write NUL-terminated messages on a connected ``AF_UNIX`` stream."""

    TERMINATOR = b"\x00"

    def __init__(self, sock: socket.socket, address: TransportAddress | None = None) -> None:
        self._sock = sock
        self._address = address

    @classmethod
    def connect(cls, path: str, *, timeout: float | None = None) -> "UnixStreamTransport":
        address = TransportAddress(kind=TransportKind.UNIX_STREAM, path=path)
        return cls(_connect_unix(path, socket.SOCK_STREAM, timeout), address)

    @property
    def address(self) -> TransportAddress | None:
        return self._address

    def send(self, data: bytes) -> int:
        self._sock.sendall(data + self.TERMINATOR)
        return len(data)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self._sock.close()


def connect_recommended(
    *,
    timeout: float | None = None,
    paths: Sequence[str] = RECOMMENDED_SOCKET_PATHS,
    datagram_only: bool = False,
) -> TransportPort:
    """Return a transport to the first well-known syslog socket accepting a connection.

    Each path is tried as a datagram socket first; when the daemon listens on a
    stream socket instead (``EPROTOTYPE``) the stream variant is tried unless
    ``datagram_only`` is set.

    Raises
    ------
    OSError
        The error of the last candidate when none connect.
    """

    last_error: OSError = FileNotFoundError(errno.ENOENT, "no syslog socket paths to probe")
    for path in paths:
        try:
            return UnixDatagramTransport.connect(path, timeout=timeout)
        except OSError as exc:
            last_error = exc
            if datagram_only or exc.errno != errno.EPROTOTYPE:
                LOGGER.debug("syslog socket %s unavailable: %s", path, exc)
                continue
        try:
            return UnixStreamTransport.connect(path, timeout=timeout)
        except OSError as exc:
            LOGGER.debug("syslog stream socket %s unavailable: %s", path, exc)
            last_error = exc
    raise last_error


__all__ = [
    "RECOMMENDED_SOCKET_PATHS",
    "UnixDatagramTransport",
    "UnixStreamTransport",
    "connect_recommended",
]
