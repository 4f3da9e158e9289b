"""Fixed-capacity byte buffer and the UTF-8 safe bounded writer.

Purpose
-------
Enforce the per-message byte budget without ever producing invalid text: a
message that does not fit is cut at the last complete UTF-8 character that
fits, and the formatter writing into it never notices.

Contents
--------
* :class:`ByteSink` - protocol for anything accepting ``write(bytes) -> int``.
* :class:`ByteBuffer` - reusable buffer with a hard capacity.
* :class:`MaxByteWriter` - lossy-success decorator that truncates at a
  character boundary.
* :func:`find_char_boundary` / :func:`is_char_boundary` helpers.

System Role
-----------
The log writer clears one :class:`ByteBuffer` per record and hands the
formatter a :class:`MaxByteWriter` wrapping it; :attr:`MaxByteWriter.overflowed`
is what the ``fail`` overflow strategy inspects afterwards.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteSink(Protocol):
    """Destination accepting raw bytes."""

    def write(self, data: bytes) -> int:
        """Store ``data`` and return how many bytes were accepted."""


def is_char_boundary(byte: int) -> bool:
    """Return ``True`` unless ``byte`` is a UTF-8 continuation byte (``0b10xxxxxx``).

    Examples
    --------
    >>> is_char_boundary(ord("a"))
    True
    >>> is_char_boundary("é".encode()[1])
    False
    """

    return byte & 0xC0 != 0x80


def find_char_boundary(data: bytes, limit: int) -> int:
    """Return the largest ``n <= limit`` such that ``data[:n]`` ends on a character boundary.

    ``data[n]`` (when it exists) is the first byte of the character that would
    otherwise be split, so the whole character is dropped.

    Examples
    --------
    >>> find_char_boundary("aé".encode(), 2)
    1
    >>> find_char_boundary("aé".encode(), 3)
    3
    >>> find_char_boundary(b"abc", 10)
    3
    """

    if limit >= len(data):
        return len(data)
    index = max(limit, 0)
    while index > 0 and not is_char_boundary(data[index]):
        index -= 1
    return index


class ByteBuffer:
    """Growable byte buffer that refuses to exceed ``capacity``.

    Examples
    --------
    >>> buf = ByteBuffer(4)
    >>> buf.write(b"abc")
    3
    >>> buf.getvalue()
    b'abc'
    >>> buf.clear()
    >>> len(buf)
    0
    """

    __slots__ = ("_capacity", "_data")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("buffer capacity must be positive")
        self._capacity = capacity
        self._data = bytearray()

    @property
    def capacity(self) -> int:
        return self._capacity

    def write(self, data: bytes) -> int:
        if len(self._data) + len(data) > self._capacity:
            raise BufferError(f"write of {len(data)} bytes exceeds buffer capacity {self._capacity}")
        self._data += data
        return len(data)

    def clear(self) -> None:
        """Logically truncate the buffer to zero bytes, keeping the allocation."""
        del self._data[:]

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)


class MaxByteWriter:
    """Forward at most ``max_bytes`` to ``sink`` while reporting every write as complete.

    The remaining budget is shared by all ``write`` calls made for one message,
    so a formatter emitting header, structured data, and body separately is
    bounded as a whole.

    Examples
    --------
    >>> buf = ByteBuffer(16)
    >>> writer = MaxByteWriter(buf, 10)
    >>> writer.write(b"this is the end")
    15
    >>> buf.getvalue()
    b'this is th'
    >>> writer.overflowed
    True
    """

    __slots__ = ("_sink", "_remaining", "_max_bytes", "_offered", "_overflowed")

    def __init__(self, sink: ByteSink, max_bytes: int) -> None:
        if max_bytes < 0:
            raise ValueError("max_bytes must not be negative")
        self._sink = sink
        self._max_bytes = max_bytes
        self._remaining = max_bytes
        self._offered = 0
        self._overflowed = False

    @property
    def remaining(self) -> int:
        """Bytes that may still be forwarded."""
        return self._remaining

    @property
    def offered(self) -> int:
        """Total bytes passed to :meth:`write`, forwarded or not."""
        return self._offered

    @property
    def overflowed(self) -> bool:
        """``True`` once any offered byte has been dropped."""
        return self._overflowed

    def write(self, data: bytes) -> int:
        size = len(data)
        if size == 0:
            return 0
        self._offered += size
        if self._remaining == 0:
            self._overflowed = True
            return size
        if size <= self._remaining:
            forwarded = self._sink.write(data)
            self._remaining -= forwarded
            return size
        cut = find_char_boundary(data, self._remaining)
        if cut:
            self._sink.write(data[:cut])
        self._remaining = 0
        self._overflowed = True
        return size

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is not None:
            flush()


__all__ = ["ByteBuffer", "ByteSink", "MaxByteWriter", "find_char_boundary", "is_char_boundary"]
