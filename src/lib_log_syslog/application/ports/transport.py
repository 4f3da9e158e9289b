"""Port describing the socket-level channel to a syslog collector."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_syslog.domain.address import TransportAddress


@runtime_checkable
class TransportPort(Protocol):
    """Send one encoded syslog message per call.

    ``send`` makes exactly one attempt and raises :class:`OSError` on failure;
    retrying is the reconnection strategy's job. ``address`` is ``None`` for
    transports built around a pre-connected socket that cannot be reacquired.
    """

    @property
    def address(self) -> TransportAddress | None:
        """Endpoint this transport is connected to."""

    def send(self, data: bytes) -> int:
        """Transmit ``data`` and return the number of payload bytes sent."""

    def flush(self) -> None:
        """Push any buffered bytes to the collector."""

    def close(self) -> None:
        """Release the underlying socket."""


__all__ = ["TransportPort"]
