"""A growable byte buffer with separate read and write positions."""

from __future__ import annotations

import os
from typing import Union

_EXTRA_READ_SIZE = 65535


class Buffer:
    """Byte buffer laid out as ``[prependable | readable | writable]``."""

    def __init__(self, init_size: int = 1024) -> None:
        if init_size < 0:
            raise ValueError("init_size must not be negative")
        self._buffer = bytearray(init_size)
        self._read_pos = 0
        self._write_pos = 0

    def readable_bytes(self) -> int:
        """Number of bytes written but not yet read."""
        return self._write_pos - self._read_pos

    def writable_bytes(self) -> int:
        """Number of bytes that fit before the buffer has to grow."""
        return len(self._buffer) - self._write_pos

    def prependable_bytes(self) -> int:
        """Number of already-consumed bytes at the front."""
        return self._read_pos

    def peek(self) -> bytes:
        """Return the readable bytes without consuming them."""
        return bytes(self._buffer[self._read_pos:self._write_pos])

    def ensure_writable(self, length: int) -> None:
        """Make room for at least ``length`` more bytes."""
        if self.writable_bytes() < length:
            self._make_space(length)

    def has_written(self, length: int) -> None:
        """Advance the write position by ``length`` bytes."""
        if length < 0 or length > self.writable_bytes():
            raise ValueError("cannot advance past the end of the buffer")
        self._write_pos += length

    def has_read(self, length: int) -> None:
        """Consume ``length`` readable bytes."""
        if length < 0 or length > self.readable_bytes():
            raise ValueError("cannot consume more than is readable")
        self._read_pos += length

    def reset(self) -> None:
        """Zero the storage and discard all content."""
        self._buffer = bytearray(len(self._buffer))
        self._read_pos = 0
        self._write_pos = 0

    def reset_to_bytes(self) -> bytes:
        """Return the readable bytes and reset the buffer."""
        data = self.peek()
        self.reset()
        return data

    def append(self, data: Union[bytes, bytearray, memoryview, str, "Buffer"]) -> None:
        """Append bytes, text (UTF-8) or the readable part of another buffer."""
        if isinstance(data, Buffer):
            raw = data.peek()
        elif isinstance(data, str):
            raw = data.encode("utf-8")
        else:
            raw = bytes(data)
        size = len(raw)
        self.ensure_writable(size)
        self._buffer[self._write_pos:self._write_pos + size] = raw
        self._write_pos += size

    def read_fd(self, fd: int) -> int:
        """Read from ``fd`` with scatter I/O; return the byte count.

        Raises OSError (BlockingIOError for a would-block descriptor).
        """
        extra = bytearray(_EXTRA_READ_SIZE)
        writable = self.writable_bytes()
        view = memoryview(self._buffer)[self._write_pos:]
        try:
            count = os.readv(fd, [view, extra])
        finally:
            view.release()
        if count <= writable:
            self._write_pos += count
        else:
            self._write_pos = len(self._buffer)
            self.append(extra[:count - writable])
        return count

    def write_fd(self, fd: int) -> int:
        """Write the readable bytes to ``fd``; return how many were written."""
        count = os.write(fd, self.peek())
        self._read_pos += count
        return count

    def _make_space(self, length: int) -> None:
        if len(self._buffer) - self.readable_bytes() < length:
            grow = self._write_pos + length + 1 - len(self._buffer)
            self._buffer.extend(bytes(grow))
        else:
            readable = self.readable_bytes()
            self._buffer[:readable] = self._buffer[self._read_pos:self._write_pos]
            self._read_pos = 0
            self._write_pos = readable