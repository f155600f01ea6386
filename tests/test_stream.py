"""Tests for the little-endian stream cursor."""

import pytest

from llcon_protocol.utils.stream import StreamCursor


def test_get_value_little_endian():
    """Multi-byte reads take the least significant byte first."""
    cur = StreamCursor(b"\x34\x12\x78\x56\x34\x12")
    assert cur.get_value(2) == 0x1234
    assert cur.get_value(4) == 0x12345678
    assert cur.pos == 6


@pytest.mark.parametrize("width", [1, 2, 3, 4])
def test_put_then_get_each_width(width):
    """Every supported width writes and reads back through the same offsets."""
    value = 0xA1B2C3D4 & ((1 << (8 * width)) - 1)
    buf = bytearray(width)
    StreamCursor(buf).put_value(value, width)
    assert StreamCursor(buf).get_value(width) == value


def test_put_value_layout():
    """Bytes land in little-endian order and the offset advances."""
    buf = bytearray(3)
    cur = StreamCursor(buf)
    cur.put_value(0x1234, 2)
    cur.put_value(0x56, 1)
    assert bytes(buf) == b"\x34\x12\x56"
    assert cur.pos == 3


def test_put_value_keeps_low_bytes():
    """Only the low bytes of an oversized value are stored."""
    buf = bytearray(1)
    StreamCursor(buf).put_value(0x1FF, 1)
    assert buf == bytearray(b"\xFF")


def test_start_offset():
    """A cursor can start part-way into the buffer."""
    cur = StreamCursor(b"\x00\x00\xAB\xCD", pos=2)
    assert cur.get_value(2) == 0xCDAB


@pytest.mark.parametrize("width", [0, 5, -1])
def test_invalid_width(width):
    """Widths outside 1-4 are programmer errors."""
    with pytest.raises(ValueError):
        StreamCursor(bytes(8)).get_value(width)
    with pytest.raises(ValueError):
        StreamCursor(bytearray(8)).put_value(0, width)


def test_read_past_end():
    """Reading beyond the buffer raises instead of returning garbage."""
    cur = StreamCursor(b"\x01")
    with pytest.raises(IndexError):
        cur.get_value(2)
    assert cur.pos == 0


def test_write_past_end():
    """Writing beyond the buffer raises and leaves it untouched."""
    buf = bytearray(1)
    with pytest.raises(IndexError):
        StreamCursor(buf).put_value(0xFFFF, 2)
    assert buf == bytearray(1)


def test_write_read_only_buffer():
    """bytes objects cannot be written through a cursor."""
    with pytest.raises(ValueError):
        StreamCursor(b"\x00\x00").put_value(1, 1)


def test_bytes_helpers():
    """Bulk copies advance the offset like integer access."""
    buf = bytearray(4)
    cur = StreamCursor(buf)
    cur.put_value(0x01, 1)
    cur.put_bytes(b"\xAA\xBB")
    assert cur.remaining == 1

    cur = StreamCursor(buf, pos=1)
    assert cur.get_bytes(2) == b"\xAA\xBB"
    assert cur.pos == 3


def test_writable_memoryview():
    """A memoryview over a bytearray is writable."""
    buf = bytearray(2)
    StreamCursor(memoryview(buf)).put_value(0xBEEF, 2)
    assert bytes(buf) == b"\xEF\xBE"
