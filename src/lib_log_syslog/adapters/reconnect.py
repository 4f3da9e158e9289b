"""Reconnection strategies implementing :class:`ReconnectPort`.

Purpose
-------
Decide what replaces a transport after a failed send, or supply the first
transport for a writer constructed without one.

Contents
--------
* :class:`AcquireSame` - reconnect to the same address every time.
* :class:`GiveUp` - close the broken transport and surface the error.
* :class:`ProbeRecommended` - re-run the well-known socket probe.

System Role
-----------
Strategies run while the writer's lock is held. They attempt one connection
and never sleep or retry; a failure leaves the writer transport-less until the
next write tries again.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from lib_log_syslog.application.ports.reconnect import ReconnectPort
from lib_log_syslog.application.ports.transport import TransportPort
from lib_log_syslog.domain.address import TransportAddress
from lib_log_syslog.domain.errors import TransportUnavailableError

from .transports import RECOMMENDED_SOCKET_PATHS, TcpFraming, connect_recommended, connect_transport

LOGGER = logging.getLogger(__name__)


def _close_quietly(transport: TransportPort | None) -> None:
    if transport is None:
        return
    try:
        transport.close()
    except OSError as exc:
        LOGGER.debug("closing broken syslog transport failed: %s", exc)


class AcquireSame(ReconnectPort):
    """Reconnect to the address of the previous transport.

    The address is fixed at construction or learned from the first transport
    handed in, then reused for every later reconnection.

    Examples
    --------
    >>> strategy = AcquireSame()
    >>> try:
    ...     strategy.reconnect(None, OSError("boom"))
    ... except TransportUnavailableError as exc:
    ...     print(exc)
    no syslog address known to reconnect to
    """

    def __init__(
        self,
        address: TransportAddress | None = None,
        *,
        timeout: float | None = None,
        tcp_framing: TcpFraming | str = TcpFraming.OCTET_COUNTING,
    ) -> None:
        self._address = address
        self._timeout = timeout
        self._tcp_framing = TcpFraming.from_name(tcp_framing)

    @property
    def address(self) -> TransportAddress | None:
        return self._address

    def reconnect(self, previous: TransportPort | None, error: BaseException) -> TransportPort:
        if previous is not None and self._address is None:
            self._address = previous.address
        _close_quietly(previous)
        if self._address is None:
            raise TransportUnavailableError("no syslog address known to reconnect to") from error
        return connect_transport(self._address, timeout=self._timeout, tcp_framing=self._tcp_framing)


class GiveUp(ReconnectPort):
    """Never reconnect: close the broken transport and re-raise the send error."""

    def reconnect(self, previous: TransportPort | None, error: BaseException) -> TransportPort:
        _close_quietly(previous)
        if isinstance(error, OSError):
            raise error
        raise TransportUnavailableError(str(error)) from error


class ProbeRecommended(ReconnectPort):
    """Reconnect to whichever well-known local syslog socket answers first."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        paths: Sequence[str] = RECOMMENDED_SOCKET_PATHS,
    ) -> None:
        self._timeout = timeout
        self._paths = tuple(paths)

    @property
    def paths(self) -> tuple[str, ...]:
        return self._paths

    def reconnect(self, previous: TransportPort | None, error: BaseException) -> TransportPort:
        _close_quietly(previous)
        return connect_recommended(timeout=self._timeout, paths=self._paths)


__all__ = ["AcquireSame", "GiveUp", "ProbeRecommended"]
