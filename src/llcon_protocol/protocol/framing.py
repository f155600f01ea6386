"""Message frame builder and parser for the llcon protocol.

Frame layout::

    +-----------+------------+-----------------+--------------+-------------+
    | 2 byte ID | 1 byte cnt | 2 byte length n | n bytes data | 2 bytes CRC |
    +-----------+------------+-----------------+--------------+-------------+

- ID: little-endian message identifier, chosen by the application
- cnt: message counter, incremented per message and wrapping after 255
- length: little-endian number of payload bytes
- CRC: inverted CRC-16 over header + payload, little-endian

Frames arrive as complete datagrams; there is no preamble and no resync.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..utils.crc import CRC16
from ..utils.stream import StreamCursor

MESSAGE_HEADER_SIZE = 5  # 2(id) + 1(cnt) + 2(length)
CRC_SIZE = 2
MESSAGE_OVERHEAD = MESSAGE_HEADER_SIZE + CRC_SIZE
MAX_MESSAGE_ID = 0xFFFF
MAX_COUNTER = 0xFF
MAX_PAYLOAD_SIZE = 0xFFFF


class DecodeFailure(Enum):
    """Why an incoming buffer was rejected."""

    TOO_SHORT = "too-short"
    LENGTH_MISMATCH = "length-mismatch"
    CRC_MISMATCH = "crc-mismatch"


class FrameError(ValueError):
    """Raised by :func:`parse_message` for a malformed or corrupted frame."""

    def __init__(self, reason: DecodeFailure) -> None:
        super().__init__(reason.value)
        self.reason = reason


@dataclass(frozen=True)
class Message:
    """A parsed protocol message."""

    message_id: int
    counter: int
    payload: bytes = b""

    def __repr__(self) -> str:
        return (
            f"Message(id=0x{self.message_id:04X}, cnt={self.counter}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )

    def to_bytes(self) -> bytes:
        return build_message(self.message_id, self.counter, self.payload)


def build_message(message_id: int, counter: int, payload: bytes = b"") -> bytes:
    """Build a complete frame ready to hand to the transport.

    Args:
        message_id: Message identifier, 0-65535.
        counter: Message counter, 0-255.
        payload: Message-specific data, at most 65535 bytes.

    Returns:
        ``bytes`` of length ``7 + len(payload)``.

    Raises:
        ValueError: If a field does not fit its wire width.
    """
    if not 0 <= message_id <= MAX_MESSAGE_ID:
        raise ValueError(f"Message ID must be 0-{MAX_MESSAGE_ID}, got {message_id}")
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"Counter must be 0-{MAX_COUNTER}, got {counter}")
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(
            f"Payload must be at most {MAX_PAYLOAD_SIZE} bytes, got {len(payload)}"
        )

    frame = bytearray(MESSAGE_OVERHEAD + len(payload))
    cur = StreamCursor(frame)

    # Header
    cur.put_value(message_id, 2)
    cur.put_value(counter, 1)
    cur.put_value(len(payload), 2)

    cur.put_bytes(payload)

    # CRC covers everything written so far
    crc = CRC16()
    crc.add_bytes(memoryview(frame)[: cur.pos])
    cur.put_value(crc.value(), CRC_SIZE)

    return bytes(frame)


def parse_message(data: bytes) -> Message:
    """Parse a received frame.

    Args:
        data: One complete frame as delivered by the transport.

    Returns:
        The decoded :class:`Message`.

    Raises:
        FrameError: With ``reason`` set to the first check that failed:
            too short, declared length inconsistent with the buffer, or
            CRC mismatch.
    """
    if len(data) < MESSAGE_OVERHEAD:
        raise FrameError(DecodeFailure.TOO_SHORT)

    cur = StreamCursor(data)
    message_id = cur.get_value(2)
    counter = cur.get_value(1)
    length = cur.get_value(2)

    if length != len(data) - MESSAGE_OVERHEAD:
        raise FrameError(DecodeFailure.LENGTH_MISMATCH)

    covered = MESSAGE_HEADER_SIZE + length
    crc = CRC16()
    crc.add_bytes(memoryview(data)[:covered])

    cur.pos = covered
    if crc.value() != cur.get_value(CRC_SIZE):
        raise FrameError(DecodeFailure.CRC_MISMATCH)

    cur.pos = MESSAGE_HEADER_SIZE
    payload = cur.get_bytes(length)

    return Message(message_id=message_id, counter=counter, payload=payload)


def try_parse_message(data: bytes) -> Message | None:
    """Like :func:`parse_message`, but return ``None`` for a bad frame."""
    try:
        return parse_message(data)
    except FrameError:
        return None


def next_counter(counter: int) -> int:
    """Return the counter value for the message after ``counter``."""
    return (counter + 1) % (MAX_COUNTER + 1)
