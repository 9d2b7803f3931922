"""Art-Net decoding: wire layout, safe reads and ArtDMX parsing.

ArtDMX payloads are validated for signature and opcode, then decoded into
``ArtDmx`` records. The universe must fit in 15 bits and the DMX length must
be even and within 2..512.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .common import optional_nonzero_u8

ARTNET_ID = b"Art-Net\x00"

OP_CODE_RANGE = (8, 10)
SEQUENCE_OFFSET = 12
UNIVERSE_RANGE = (14, 16)
LENGTH_RANGE = (16, 18)
DMX_DATA_OFFSET = 18
DMX_MAX_SLOTS = 512

ARTDMX_OPCODE = 0x5000
MAX_UNIVERSE_ID = 0x7FFF


class ArtNetError(ValueError):
    """Base class for Art-Net parsing and reading errors."""


class TooShortError(ArtNetError):
    """The payload does not hold enough bytes."""

    def __init__(self, needed: int, actual: int) -> None:
        self.needed = needed
        self.actual = actual
        super().__init__(f"payload too short: need {needed} bytes, got {actual}")


class InvalidDmxLengthError(ArtNetError):
    """The ArtDMX length field is odd or outside 2..512."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"invalid DMX length: {length} (expected even, 2..=512)")


class InvalidUniverseIdError(ArtNetError):
    """The universe identifier does not fit in 15 bits."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid Art-Net universe id: {value}")


class UnsupportedOpCodeError(ArtNetError):
    """The Art-Net opcode is not ArtDMX."""

    def __init__(self, opcode: int) -> None:
        self.opcode = opcode
        super().__init__(f"unsupported Art-Net opcode: {opcode}")


@dataclass(frozen=True)
class ArtDmx:
    """A decoded ArtDMX packet with its raw slot data."""

    universe: int
    sequence: int | None
    slots: bytes


class ArtNetReader:
    """Bounds-checked byte access over an Art-Net payload."""

    def __init__(self, payload: bytes | bytearray | memoryview) -> None:
        self._payload = bytes(payload)

    def require_len(self, needed: int) -> None:
        """Raise ``TooShortError`` unless the payload has ``needed`` bytes."""
        if len(self._payload) < needed:
            raise TooShortError(needed, len(self._payload))

    def read_u8(self, offset: int) -> int:
        """Read a single byte at ``offset``."""
        if not 0 <= offset < len(self._payload):
            raise TooShortError(offset + 1, len(self._payload))
        return self._payload[offset]

    def read_slice(self, start: int, end: int) -> bytes:
        """Read the bytes in ``[start, end)``."""
        if start < 0 or start > end or end > len(self._payload):
            raise TooShortError(end, len(self._payload))
        return self._payload[start:end]

    def _read_u16(self, start: int, end: int, fmt: str) -> int:
        data = self.read_slice(start, end)
        if len(data) != 2:
            raise TooShortError(2, len(data))
        return struct.unpack(fmt, data)[0]

    def read_u16_le(self, start: int, end: int) -> int:
        """Read a little-endian 16-bit value from ``[start, end)``."""
        return self._read_u16(start, end, "<H")

    def read_u16_be(self, start: int, end: int) -> int:
        """Read a big-endian 16-bit value from ``[start, end)``."""
        return self._read_u16(start, end, ">H")

    def read_dmx_length(self, start: int, end: int) -> int:
        """Read the DMX data length; it must be even and within 2..512."""
        length = self.read_u16_be(start, end)
        if not 2 <= length <= DMX_MAX_SLOTS or length % 2 != 0:
            raise InvalidDmxLengthError(length)
        return length

    def read_universe_id(self, start: int, end: int) -> int:
        """Read the universe identifier and check it fits in 15 bits."""
        value = self.read_u16_le(start, end)
        if value > MAX_UNIVERSE_ID:
            raise InvalidUniverseIdError(value)
        return value

    def read_optional_nonzero_u8(self, offset: int) -> int | None:
        """Read a byte, returning ``None`` when it is zero."""
        return optional_nonzero_u8(self.read_u8(offset))

    def read_signature(self) -> bytes:
        """Read the Art-Net signature bytes."""
        return self.read_slice(0, len(ARTNET_ID))


def parse_artdmx(payload: bytes | bytearray | memoryview) -> ArtDmx | None:
    """Parse an ArtDMX packet from a UDP payload.

    Returns ``None`` when the payload is not Art-Net and raises
    ``ArtNetError`` when it is malformed Art-Net.
    """
    reader = ArtNetReader(payload)
    reader.require_len(DMX_DATA_OFFSET)

    if reader.read_signature() != ARTNET_ID:
        return None

    opcode = reader.read_u16_le(*OP_CODE_RANGE)
    if opcode != ARTDMX_OPCODE:
        raise UnsupportedOpCodeError(opcode)

    sequence = reader.read_optional_nonzero_u8(SEQUENCE_OFFSET)
    universe = reader.read_universe_id(*UNIVERSE_RANGE)
    data_len = reader.read_dmx_length(*LENGTH_RANGE)
    needed = DMX_DATA_OFFSET + data_len
    reader.require_len(needed)
    slots = reader.read_slice(DMX_DATA_OFFSET, needed)
    return ArtDmx(universe=universe, sequence=sequence, slots=slots)