"""MCP server for inspecting and producing llcon protocol frames.

Exposes the codec as tools via the Model Context Protocol using the official
Python MCP SDK with stdio transport. Useful when debugging captured
datagrams by hand; it never touches the network itself.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .protocol.framing import (
    MESSAGE_HEADER_SIZE,
    MESSAGE_OVERHEAD,
    CRC_SIZE,
    FrameError,
    build_message,
    parse_message,
)
from .protocol.framing import next_counter as _next_counter
from .utils.crc import crc16
from .utils.stream import StreamCursor

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "llcon-protocol",
    instructions="Encode, decode and inspect llcon protocol frames",
)


def _parse_hex(text: str) -> bytes:
    """Decode a hex string, tolerating spaces and an optional 0x prefix."""
    cleaned = "".join(text.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    return bytes.fromhex(cleaned)


# ─── CODEC TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def encode_message(
    message_id: int, counter: int, payload_hex: str = ""
) -> dict[str, Any]:
    """Build a frame from its fields.

    Args:
        message_id: Message identifier (0-65535).
        counter: Message counter (0-255).
        payload_hex: Payload bytes as hex, e.g. "01 02 ff".
    """
    try:
        payload = _parse_hex(payload_hex)
        frame = build_message(message_id, counter, payload)
    except ValueError as e:
        return {"error": str(e)}

    crc = int.from_bytes(frame[-CRC_SIZE:], "little")
    return {
        "frame": frame.hex(" "),
        "length": len(frame),
        "crc": f"0x{crc:04X}",
    }


@mcp.tool()
def decode_message(frame_hex: str) -> dict[str, Any]:
    """Validate a frame and return its fields.

    Args:
        frame_hex: One complete frame as hex.
    """
    try:
        data = _parse_hex(frame_hex)
    except ValueError as e:
        return {"valid": False, "error": f"Invalid hex: {e}"}

    try:
        message = parse_message(data)
    except FrameError as e:
        logger.debug("Rejected %d-byte frame: %s", len(data), e.reason.value)
        return {"valid": False, "error": e.reason.value}

    return {
        "valid": True,
        "message_id": message.message_id,
        "counter": message.counter,
        "payload": message.payload.hex(" "),
        "payload_length": len(message.payload),
    }


@mcp.tool()
def compute_crc(data_hex: str) -> dict[str, Any]:
    """Compute the protocol CRC-16 over arbitrary bytes.

    Args:
        data_hex: Bytes covered by the checksum, as hex.
    """
    try:
        data = _parse_hex(data_hex)
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}

    crc = crc16(data)
    return {
        "crc": crc,
        "crc_hex": f"0x{crc:04X}",
        "wire": crc.to_bytes(CRC_SIZE, "little").hex(" "),
    }


@mcp.tool()
def inspect_frame(frame_hex: str) -> dict[str, Any]:
    """Break a frame into its fields, even when it fails validation.

    Reports whichever header fields are present, the length the buffer
    should have for the declared payload, the transmitted and recomputed
    CRC, and the parser's verdict.

    Args:
        frame_hex: Frame bytes as hex.
    """
    try:
        data = _parse_hex(frame_hex)
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}

    result: dict[str, Any] = {"total_length": len(data)}
    cur = StreamCursor(data)
    for name, width in (("message_id", 2), ("counter", 1), ("declared_length", 2)):
        if cur.remaining < width:
            break
        result[name] = cur.get_value(width)

    if "declared_length" in result:
        declared = result["declared_length"]
        result["expected_total_length"] = declared + MESSAGE_OVERHEAD
        covered = MESSAGE_HEADER_SIZE + declared
        if len(data) >= covered + CRC_SIZE:
            cur.pos = covered
            result["payload"] = data[MESSAGE_HEADER_SIZE:covered].hex(" ")
            result["transmitted_crc"] = f"0x{cur.get_value(CRC_SIZE):04X}"
            result["computed_crc"] = f"0x{crc16(data[:covered]):04X}"

    try:
        parse_message(data)
    except FrameError as e:
        result["valid"] = False
        result["error"] = e.reason.value
    else:
        result["valid"] = True

    return result


@mcp.tool()
def next_counter(counter: int) -> dict[str, Any]:
    """Return the counter a sender uses after ``counter`` (wraps at 255).

    Args:
        counter: Current counter value (0-255).
    """
    if not 0 <= counter <= 255:
        return {"error": "Counter must be 0-255"}
    return {"counter": _next_counter(counter)}


# ─── RESOURCES ────────────────────────────────────────────────────────

WIRE_FORMAT = """\
offset  size  field
  0      2   message id        (little-endian u16)
  2      1   counter           (u8, wraps mod 256)
  3      2   payload length n  (little-endian u16)
  5      n   payload bytes     (opaque)
  5+n    2   crc               (little-endian u16, inverted CRC-16)

CRC-16: polynomial 0x1021, init 0xFFFF, MSB first, final XOR 0xFFFF,
computed over bytes [0, 5+n). Total frame size n + 7, n <= 65535.
"""


@mcp.resource("llcon://wire-format")
def wire_format() -> str:
    """Frame layout reference."""
    return WIRE_FORMAT


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
