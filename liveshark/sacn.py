"""sACN (E1.31) DMX packet parsing."""

from __future__ import annotations

from dataclasses import dataclass

from .sacn_reader import (
    ACN_PID,
    ACN_PID_RANGE,
    DMP_VECTOR_OFFSET,
    DMP_VECTOR_SET_PROPERTY,
    DMX_DATA_OFFSET,
    FRAMING_VECTOR_DMX,
    FRAMING_VECTOR_RANGE,
    MIN_LEN,
    POSTAMBLE_SIZE,
    POSTAMBLE_SIZE_RANGE,
    PREAMBLE_SIZE,
    PREAMBLE_SIZE_RANGE,
    ROOT_VECTOR_DATA,
    ROOT_VECTOR_RANGE,
    SEQUENCE_OFFSET,
    SOURCE_NAME_RANGE,
    UNIVERSE_RANGE,
    InvalidAcnPidError,
    InvalidDmpVectorError,
    InvalidFramingVectorError,
    InvalidRootVectorError,
    SacnReader,
)


@dataclass(frozen=True)
class SacnDmx:
    """A decoded sACN DMX packet with its raw slot data."""

    universe: int
    cid: str
    source_name: str | None
    sequence: int | None
    slots: bytes


def parse_sacn_dmx(payload: bytes | bytearray | memoryview) -> SacnDmx | None:
    """Parse an sACN DMX packet from a UDP payload.

    Returns ``None`` when the payload is not sACN and raises ``SacnError``
    when it is malformed sACN.
    """
    reader = SacnReader(payload)
    reader.require_len(MIN_LEN)

    preamble = reader.read_u16_be(*PREAMBLE_SIZE_RANGE)
    postamble = reader.read_u16_be(*POSTAMBLE_SIZE_RANGE)
    if preamble != PREAMBLE_SIZE or postamble != POSTAMBLE_SIZE:
        return None

    if reader.read_slice(*ACN_PID_RANGE) != ACN_PID:
        raise InvalidAcnPidError()

    root_vector = reader.read_u32_be(*ROOT_VECTOR_RANGE)
    if root_vector != ROOT_VECTOR_DATA:
        raise InvalidRootVectorError(root_vector)

    framing_vector = reader.read_u32_be(*FRAMING_VECTOR_RANGE)
    if framing_vector != FRAMING_VECTOR_DMX:
        raise InvalidFramingVectorError(framing_vector)

    dmp_vector = reader.read_u8(DMP_VECTOR_OFFSET)
    if dmp_vector != DMP_VECTOR_SET_PROPERTY:
        raise InvalidDmpVectorError(dmp_vector)

    reader.read_start_code()

    universe = reader.read_u16_be(*UNIVERSE_RANGE)
    cid = reader.read_cid_hex()
    source_name = reader.read_optional_ascii_string(*SOURCE_NAME_RANGE)
    sequence = reader.read_u8(SEQUENCE_OFFSET)
    data_len = reader.read_dmx_data_len()
    slots = reader.read_slice(DMX_DATA_OFFSET, DMX_DATA_OFFSET + data_len) if data_len > 0 else b""

    return SacnDmx(
        universe=universe,
        cid=cid,
        source_name=source_name,
        sequence=sequence,
        slots=slots,
    )