"""Shared mutable state of a log writer: buffer, transport, and reconnect policy.

All three are only touched while :meth:`BufferedTransport.acquire` holds the
lock, which makes clear/format/send atomic per record.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from lib_log_syslog.application.ports.reconnect import ReconnectPort
from lib_log_syslog.application.ports.transport import TransportPort
from lib_log_syslog.domain.bounded import ByteBuffer


class BufferedTransport:
    """Lock-guarded triple of buffer, optional transport, and reconnection strategy."""

    def __init__(
        self,
        *,
        capacity: int,
        transport: TransportPort | None,
        reconnect: ReconnectPort,
    ) -> None:
        self.buffer = ByteBuffer(capacity)
        self.transport = transport
        self.reconnect = reconnect
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator["BufferedTransport"]:
        """Hold the lock for the duration of the ``with`` block."""
        with self._lock:
            yield self

    def replace_transport(self, error: BaseException) -> TransportPort:
        """Hand the current transport to the strategy and install its replacement.

        The state is left transport-less before the strategy runs, so a failed
        reconnection (which re-raises) never leaves a broken handle behind.
        Must be called with the lock held.
        """

        previous = self.transport
        self.transport = None
        self.transport = self.reconnect.reconnect(previous, error)
        return self.transport


__all__ = ["BufferedTransport"]
