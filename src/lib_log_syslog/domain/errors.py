"""Exception types raised across the syslog pipeline.

Transport failures stay plain :class:`OSError` subclasses so socket errors
propagate unchanged; only the cases the standard library has no name for get a
class here.
"""

from __future__ import annotations


class SyslogError(Exception):
    """Base class for errors raised by :mod:`lib_log_syslog`."""


class SyslogFormatError(SyslogError):
    """The formatter could not render a message into its sink."""


class BufferOverflowError(SyslogFormatError):
    """A rendered message exceeded the buffer and the overflow strategy is ``fail``."""

    def __init__(self, capacity: int, attempted: int) -> None:
        super().__init__(f"syslog message of {attempted} bytes exceeds the {capacity} byte buffer")
        self.capacity = capacity
        self.attempted = attempted


class TransportUnavailableError(SyslogError, ConnectionError):
    """No transport is connected and none could be acquired."""


__all__ = [
    "BufferOverflowError",
    "SyslogError",
    "SyslogFormatError",
    "TransportUnavailableError",
]
