"""sACN (E1.31) wire layout, errors and bounds-checked byte access.

The layout constants are the source of truth for byte offsets. The reader
applies the protocol conventions: a zero start code, a DMP property value
count that includes the start code, a lowercase hex CID and ASCII source
names padded with NUL bytes.
"""

from __future__ import annotations

import struct

PREAMBLE_SIZE_RANGE = (0, 2)
POSTAMBLE_SIZE_RANGE = (2, 4)
ACN_PID_RANGE = (4, 16)

ROOT_VECTOR_RANGE = (18, 22)
CID_RANGE = (22, 38)

FRAMING_VECTOR_RANGE = (40, 44)
SOURCE_NAME_RANGE = (44, 108)
SEQUENCE_OFFSET = 111
UNIVERSE_RANGE = (113, 115)

DMP_VECTOR_OFFSET = 117
DMP_PROPERTY_VALUE_COUNT_RANGE = (123, 125)
START_CODE_OFFSET = 125
DMX_DATA_OFFSET = 126
DMX_MAX_SLOTS = 512

ACN_PID = b"ASC-E1.17\x00\x00\x00"
PREAMBLE_SIZE = 0x0010
POSTAMBLE_SIZE = 0x0000
ROOT_VECTOR_DATA = 0x0000_0004
FRAMING_VECTOR_DMX = 0x0000_0002
DMP_VECTOR_SET_PROPERTY = 0x02

MIN_LEN = DMP_VECTOR_OFFSET + 1


class SacnError(ValueError):
    """Base class for sACN parsing and reading errors."""


class TooShortError(SacnError):
    """The payload does not hold enough bytes."""

    def __init__(self, needed: int, actual: int) -> None:
        self.needed = needed
        self.actual = actual
        super().__init__(f"payload too short: need {needed} bytes, got {actual}")


class InvalidStartCodeError(SacnError):
    """The DMX start code is not zero."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid start code: {value}")


class InvalidPropertyValueCountError(SacnError):
    """The DMP property value count is zero or too large."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"invalid property value count: {count}")


class InvalidDmxLengthError(SacnError):
    """The DMX data length cannot be represented."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"invalid DMX data length: {length}")


class InvalidAcnPidError(SacnError):
    """The ACN packet identifier does not match."""

    def __init__(self) -> None:
        super().__init__("invalid ACN PID")


class InvalidRootVectorError(SacnError):
    """The root layer vector is not the data vector."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid root vector: {value}")


class InvalidFramingVectorError(SacnError):
    """The framing layer vector is not the DMX vector."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid framing vector: {value}")


class InvalidDmpVectorError(SacnError):
    """The DMP layer vector is not Set Property."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid DMP vector: {value}")


class SacnReader:
    """Bounds-checked byte access over an sACN payload."""

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

    def read_u16_be(self, start: int, end: int) -> int:
        """Read a big-endian 16-bit value from ``[start, end)``."""
        data = self.read_slice(start, end)
        if len(data) != 2:
            raise TooShortError(2, len(data))
        return struct.unpack(">H", data)[0]

    def read_u32_be(self, start: int, end: int) -> int:
        """Read a big-endian 32-bit value from ``[start, end)``."""
        data = self.read_slice(start, end)
        if len(data) != 4:
            raise TooShortError(4, len(data))
        return struct.unpack(">I", data)[0]

    def read_ascii_string(self, start: int, end: int) -> str:
        """Read a NUL-padded string and trim padding and whitespace."""
        raw = self.read_slice(start, end).decode("utf-8", errors="replace")
        return raw.rstrip("\x00").strip()

    def read_optional_ascii_string(self, start: int, end: int) -> str | None:
        """Read a string, returning ``None`` when it is empty."""
        return self.read_ascii_string(start, end) or None

    def read_cid_hex(self) -> str:
        """Read the CID as a canonical lowercase hex string."""
        return self.read_slice(*CID_RANGE).hex()

    def read_start_code(self) -> int:
        """Read the DMX start code; it must be zero."""
        value = self.read_u8(START_CODE_OFFSET)
        if value != 0x00:
            raise InvalidStartCodeError(value)
        return value

    def read_dmx_data_len(self) -> int:
        """Return the number of DMX slots, bounded by the property value count."""
        available = max(0, len(self._payload) - DMX_DATA_OFFSET)
        data_len = min(available, DMX_MAX_SLOTS)
        if len(self._payload) >= DMP_PROPERTY_VALUE_COUNT_RANGE[1]:
            value = self.read_u16_be(*DMP_PROPERTY_VALUE_COUNT_RANGE)
            if value == 0:
                raise InvalidPropertyValueCountError(value)
            count_len = value - 1
            if count_len > DMX_MAX_SLOTS:
                raise InvalidPropertyValueCountError(value)
            data_len = min(count_len, available)
        return data_len