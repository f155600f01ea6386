"""Framed binary message codec for the llcon audio conferencing protocol."""

from .protocol.framing import (
    DecodeFailure,
    FrameError,
    Message,
    build_message,
    next_counter,
    parse_message,
    try_parse_message,
)
from .utils.crc import CRC16, crc16
