"""Little-endian integer access to a byte buffer at an advancing offset.

All header and trailer fields of an llcon frame are read and written through
a :class:`StreamCursor`. Widths are 1 to 4 bytes and the byte order is fixed
to little-endian regardless of the host.
"""

from __future__ import annotations

MAX_VALUE_SIZE = 4  # values are at most 32 bits wide


class StreamCursor:
    """Reads and writes fixed-width unsigned integers at ``pos``.

    Each call advances ``pos`` by the number of bytes consumed or produced.
    Calls that would run past the buffer, or that ask for an unsupported
    width, raise immediately: they indicate a sizing bug in the caller, not
    bad input data.

    Usage::

        buf = bytearray(3)
        cur = StreamCursor(buf)
        cur.put_value(0x1234, 2)
        cur.put_value(0x56, 1)
        assert bytes(buf) == b"\\x34\\x12\\x56"
    """

    def __init__(self, buffer: bytes | bytearray | memoryview, pos: int = 0) -> None:
        self._buffer = buffer
        self.pos = pos

    @property
    def buffer(self) -> bytes | bytearray | memoryview:
        return self._buffer

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self.pos

    def _check(self, num_bytes: int) -> None:
        if num_bytes > self.remaining:
            raise IndexError(
                f"Need {num_bytes} byte(s) at offset {self.pos}, "
                f"only {self.remaining} remaining"
            )

    @staticmethod
    def _check_width(num_bytes: int) -> None:
        if not 1 <= num_bytes <= MAX_VALUE_SIZE:
            raise ValueError(f"Value width must be 1-4 bytes, got {num_bytes}")

    def get_value(self, num_bytes: int) -> int:
        """Read a little-endian unsigned integer of ``num_bytes`` bytes."""
        self._check_width(num_bytes)
        self._check(num_bytes)
        value = int.from_bytes(self._buffer[self.pos : self.pos + num_bytes], "little")
        self.pos += num_bytes
        return value

    def put_value(self, value: int, num_bytes: int) -> None:
        """Store the low ``num_bytes`` bytes of ``value``, little-endian."""
        self._check_width(num_bytes)
        self._check(num_bytes)
        mask = (1 << (8 * num_bytes)) - 1
        self._writable()[self.pos : self.pos + num_bytes] = (value & mask).to_bytes(
            num_bytes, "little"
        )
        self.pos += num_bytes

    def get_bytes(self, count: int) -> bytes:
        """Copy out the next ``count`` bytes."""
        self._check(count)
        data = bytes(self._buffer[self.pos : self.pos + count])
        self.pos += count
        return data

    def put_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Copy ``data`` into the buffer at the current position."""
        count = len(data)
        self._check(count)
        self._writable()[self.pos : self.pos + count] = data
        self.pos += count

    def _writable(self) -> bytearray | memoryview:
        if isinstance(self._buffer, bytearray):
            return self._buffer
        if isinstance(self._buffer, memoryview) and not self._buffer.readonly:
            return self._buffer
        raise ValueError("Cannot write to a read-only buffer")
