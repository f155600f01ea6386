"""Low-level helpers: byte-stream cursor and CRC-16."""

from .crc import CRC16, crc16
from .stream import StreamCursor
