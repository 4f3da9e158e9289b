"""Socket transports to syslog collectors.

:func:`connect_transport` dispatches over the closed set of
:class:`~lib_log_syslog.domain.address.TransportKind` variants; reconnection
strategies call it with the address of the transport they replace.
"""

from __future__ import annotations

from lib_log_syslog.application.ports.transport import TransportPort
from lib_log_syslog.domain.address import TransportAddress, TransportKind

from .inet import TcpFraming, TcpTransport, UdpTransport
from .unix import RECOMMENDED_SOCKET_PATHS, UnixDatagramTransport, UnixStreamTransport, connect_recommended


def connect_transport(
    address: TransportAddress,
    *,
    timeout: float | None = None,
    tcp_framing: TcpFraming | str = TcpFraming.OCTET_COUNTING,
) -> TransportPort:
    """Open a fresh transport to ``address``.

    Raises
    ------
    OSError
        When the endpoint refuses or cannot be resolved.
    """

    if address.kind is TransportKind.UNIX_DATAGRAM:
        return UnixDatagramTransport.connect(address.path or "", timeout=timeout)
    if address.kind is TransportKind.UNIX_STREAM:
        return UnixStreamTransport.connect(address.path or "", timeout=timeout)
    if address.kind is TransportKind.UDP:
        return UdpTransport.connect(address.host or "", address.port or 0, timeout=timeout)
    return TcpTransport.connect(address.host or "", address.port or 0, timeout=timeout, framing=tcp_framing)


__all__ = [
    "RECOMMENDED_SOCKET_PATHS",
    "TcpFraming",
    "TcpTransport",
    "UdpTransport",
    "UnixDatagramTransport",
    "UnixStreamTransport",
    "connect_recommended",
    "connect_transport",
]
