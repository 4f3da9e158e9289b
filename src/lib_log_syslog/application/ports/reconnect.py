"""Port for policies that replace a failed transport."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .transport import TransportPort


@runtime_checkable
class ReconnectPort(Protocol):
    """Produce a fresh transport after ``error`` broke (or prevented) ``previous``."""

    def reconnect(self, previous: TransportPort | None, error: BaseException) -> TransportPort:
        """Return a connected transport or raise :class:`OSError`."""


__all__ = ["ReconnectPort"]
