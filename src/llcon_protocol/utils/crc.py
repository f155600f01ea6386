"""CRC-16 used to protect llcon protocol messages.

Generator polynomial G(x) = x^16 + x^12 + x^5 + 1, register initialised to
all ones, input bytes fed most-significant bit first, no reflection. The
value put on the wire is the inverted register (CRC-16/GENIBUS,
check("123456789") = 0xD64E).
"""

from __future__ import annotations

POLYNOMIAL = 0x1021
INITIAL_REGISTER = 0xFFFF
REGISTER_MASK = 0xFFFF


class CRC16:
    """Rolling CRC-16 accumulator for a single message.

    Feed the covered bytes with :meth:`add_byte`, then read the result once
    with :meth:`value`. Reading the value finalises the instance; use a new
    one for the next message.
    """

    def __init__(self) -> None:
        self._register = INITIAL_REGISTER
        self._finalized = False

    @property
    def register(self) -> int:
        return self._register

    def add_byte(self, byte: int) -> None:
        """Shift the eight bits of ``byte`` into the register, MSB first."""
        if self._finalized:
            raise RuntimeError("CRC already finalized; create a new CRC16 instance")
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte must be 0-255, got {byte}")

        reg = self._register
        for bit in range(7, -1, -1):
            feedback = ((reg >> 15) & 1) ^ ((byte >> bit) & 1)
            reg = (reg << 1) & REGISTER_MASK
            if feedback:
                reg ^= POLYNOMIAL
        self._register = reg

    def add_bytes(self, data: bytes | bytearray | memoryview) -> None:
        for byte in data:
            self.add_byte(byte)

    def value(self) -> int:
        """Return the inverted register as transmitted on the wire."""
        self._finalized = True
        return self._register ^ REGISTER_MASK


def crc16(data: bytes | bytearray | memoryview) -> int:
    """Compute the finalised CRC-16 of ``data`` in one call.

    Args:
        data: The bytes covered by the checksum.

    Returns:
        The 16-bit value to transmit (already inverted).
    """
    crc = CRC16()
    crc.add_bytes(data)
    return crc.value()
