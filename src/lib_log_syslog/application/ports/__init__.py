"""Protocols the application layer depends on."""

from __future__ import annotations

from .formatter import FormatterPort
from .reconnect import ReconnectPort
from .time import ClockPort
from .transport import TransportPort

__all__ = ["ClockPort", "FormatterPort", "ReconnectPort", "TransportPort"]
