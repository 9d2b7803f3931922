"""Synthetic PCAPNG capture fixtures for Art-Net, sACN and plain UDP flows.

Captures are written in big-endian PCAPNG with a single Ethernet interface.
Every packet is an IPv4/UDP frame between 10.0.0.1 and 10.0.0.2.
"""

from __future__ import annotations

import argparse
import enum
import re
import struct
import sys
from collections.abc import Iterable, Sequence
from os import PathLike
from pathlib import Path

from . import artnet
from . import sacn_reader as sacn

ETHERTYPE_IPV4 = 0x0800
UDP_PROTO = 17
ARTNET_PORT = 6454
SACN_PORT = 5568

PCAPNG_SECTION_HEADER = 0x0A0D0D0A
PCAPNG_INTERFACE_DESCRIPTION = 1
PCAPNG_ENHANCED_PACKET = 6
PCAPNG_BYTE_ORDER_MAGIC = 0x1A2B3C4D
LINKTYPE_ETHERNET = 1
SNAPLEN = 65535

FIXTURE_SRC_IP = "10.0.0.1"
FIXTURE_DST_IP = "10.0.0.2"
FIXTURE_UNIVERSE = 1
PACKET_INTERVAL_US = 1_000_000

_SRC_MAC = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06])
_DST_MAC = bytes([0x0A, 0x0B, 0x0C, 0x0D, 0x0E, 0x0F])
_OCTET = re.compile(r"\+?[0-9]+")

StrPath = str | PathLike


class Protocol(enum.Enum):
    """Show-control protocol carried by a fixture capture."""

    SACN = "sacn"
    ARTNET = "artnet"

    @property
    def port(self) -> int:
        """Standard UDP port of the protocol."""
        return SACN_PORT if self is Protocol.SACN else ARTNET_PORT

    def build_payload(self, sequence: int, slots: bytes, universe: int) -> bytes:
        """Build a DMX payload of this protocol."""
        if self is Protocol.SACN:
            return build_sacn_payload(sequence, slots, universe)
        return build_artnet_payload(sequence, slots, universe)


def build_artnet_payload(sequence: int, slots: bytes | Sequence[int], universe: int) -> bytes:
    """Build an ArtDMX payload; slots beyond 512 are dropped."""
    data = bytes(slots)[: artnet.DMX_MAX_SLOTS]
    payload = bytearray(artnet.DMX_DATA_OFFSET + len(data))
    payload[: len(artnet.ARTNET_ID)] = artnet.ARTNET_ID
    payload[slice(*artnet.OP_CODE_RANGE)] = struct.pack("<H", artnet.ARTDMX_OPCODE)
    payload[artnet.SEQUENCE_OFFSET] = sequence
    payload[slice(*artnet.UNIVERSE_RANGE)] = struct.pack("<H", universe)
    payload[slice(*artnet.LENGTH_RANGE)] = struct.pack(">H", len(data))
    payload[artnet.DMX_DATA_OFFSET :] = data
    return bytes(payload)


def build_sacn_payload(sequence: int, slots: bytes | Sequence[int], universe: int) -> bytes:
    """Build an sACN DMX payload; slots beyond 512 are dropped."""
    data = bytes(slots)[: sacn.DMX_MAX_SLOTS]
    payload = bytearray(sacn.DMX_DATA_OFFSET + len(data))
    payload[slice(*sacn.PREAMBLE_SIZE_RANGE)] = struct.pack(">H", sacn.PREAMBLE_SIZE)
    payload[slice(*sacn.POSTAMBLE_SIZE_RANGE)] = struct.pack(">H", sacn.POSTAMBLE_SIZE)
    payload[slice(*sacn.ACN_PID_RANGE)] = sacn.ACN_PID
    payload[slice(*sacn.ROOT_VECTOR_RANGE)] = struct.pack(">I", sacn.ROOT_VECTOR_DATA)
    payload[slice(*sacn.CID_RANGE)] = cid_bytes()
    payload[slice(*sacn.FRAMING_VECTOR_RANGE)] = struct.pack(">I", sacn.FRAMING_VECTOR_DMX)
    payload[sacn.SEQUENCE_OFFSET] = sequence
    payload[slice(*sacn.UNIVERSE_RANGE)] = struct.pack(">H", universe)
    payload[sacn.DMP_VECTOR_OFFSET] = sacn.DMP_VECTOR_SET_PROPERTY
    payload[slice(*sacn.DMP_PROPERTY_VALUE_COUNT_RANGE)] = struct.pack(">H", len(data) + 1)
    payload[sacn.START_CODE_OFFSET] = 0x00
    payload[sacn.DMX_DATA_OFFSET :] = data
    return bytes(payload)


def cid_bytes() -> bytes:
    """Return the fixed fixture CID: bytes 0 through 15."""
    return bytes(range(16))


def parse_ipv4(ip: str) -> bytes:
    """Parse a dotted IPv4 address leniently; unparsable parts become zero."""
    parts = ip.split(".")
    if len(parts) > 4:
        raise ValueError(f"too many parts in IPv4 address: {ip!r}")
    octets = [0, 0, 0, 0]
    for idx, part in enumerate(parts):
        if _OCTET.fullmatch(part) and int(part) <= 0xFF:
            octets[idx] = int(part)
    return bytes(octets)


def ipv4_checksum(header: bytes) -> int:
    """Compute the one's-complement checksum of an IPv4 header."""
    if len(header) % 2:
        raise ValueError("IPv4 header length must be even")
    total = sum(word for (word,) in struct.iter_unpack(">H", header))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def build_ipv4_udp_packet(
    src_ip: str,
    dst_ip: str,
    src_port: int,
    dst_port: int,
    payload: bytes,
) -> bytes:
    """Build an Ethernet frame holding an IPv4/UDP datagram."""
    ethernet = _DST_MAC[:0] + bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06])
    ethernet += _DST_MAC + struct.pack(">H", ETHERTYPE_IPV4)

    total_len = 20 + 8 + len(payload)
    ip_header = bytearray(20)
    ip_header[0] = 0x45
    ip_header[2:4] = struct.pack(">H", total_len)
    ip_header[8] = 64
    ip_header[9] = UDP_PROTO
    ip_header[12:16] = parse_ipv4(src_ip)
    ip_header[16:20] = parse_ipv4(dst_ip)
    ip_header[10:12] = struct.pack(">H", ipv4_checksum(bytes(ip_header)))

    udp_header = struct.pack(">HHHH", src_port, dst_port, 8 + len(payload), 0)
    return ethernet + bytes(ip_header) + udp_header + bytes(payload)


def pcapng_block(block_type: int, body: bytes) -> bytes:
    """Wrap a body in a big-endian PCAPNG block with leading and trailing length."""
    total_len = 8 + len(body) + 4
    length = struct.pack(">I", total_len)
    return struct.pack(">I", block_type) + length + bytes(body) + length


def _section_header_body() -> bytes:
    return struct.pack(">IHHq", PCAPNG_BYTE_ORDER_MAGIC, 1, 0, -1)


def _interface_desc_body() -> bytes:
    return struct.pack(">HHI", LINKTYPE_ETHERNET, 0, SNAPLEN)


def _enhanced_packet_body(ts_us: int, data: bytes) -> bytes:
    ts_high = (ts_us >> 32) & 0xFFFF_FFFF
    ts_low = ts_us & 0xFFFF_FFFF
    cap_len = len(data)
    padding = b"\x00" * (-cap_len % 4)
    return struct.pack(">IIIII", 0, ts_high, ts_low, cap_len, cap_len) + bytes(data) + padding


def write_pcapng(path: StrPath, packets: Iterable[tuple[int, bytes]]) -> None:
    """Write ``(timestamp_us, frame)`` pairs as a PCAPNG capture."""
    blocks = [
        pcapng_block(PCAPNG_SECTION_HEADER, _section_header_body()),
        pcapng_block(PCAPNG_INTERFACE_DESCRIPTION, _interface_desc_body()),
    ]
    blocks.extend(
        pcapng_block(PCAPNG_ENHANCED_PACKET, _enhanced_packet_body(ts_us, data))
        for ts_us, data in packets
    )
    Path(path).write_bytes(b"".join(blocks))


def write_capture(path: StrPath, protocol: Protocol, sequences: Iterable[int]) -> None:
    """Write one DMX packet per sequence number, one second apart, on universe 1."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    protocol = Protocol(protocol)
    packets = []
    for idx, seq in enumerate(sequences):
        payload = protocol.build_payload(seq, bytes([seq, 0x00]), FIXTURE_UNIVERSE)
        frame = build_ipv4_udp_packet(
            FIXTURE_SRC_IP, FIXTURE_DST_IP, protocol.port, protocol.port, payload
        )
        packets.append((idx * PACKET_INTERVAL_US, frame))
    write_pcapng(path, packets)


def write_flow_capture(path: StrPath, timestamps_us: Iterable[int], payload_len: int) -> None:
    """Write identical plain UDP packets at the given microsecond timestamps."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = build_ipv4_udp_packet(
        FIXTURE_SRC_IP, FIXTURE_DST_IP, 1000, 2000, b"\x42" * payload_len
    )
    write_pcapng(path, [(ts, frame) for ts in timestamps_us])


def write_all_fixtures(root: StrPath) -> list[Path]:
    """Write every fixture capture below ``root`` and return their paths."""
    root = Path(root)
    captures = [
        ("sacn_burst", Protocol.SACN, [1, 2, 5, 6, 10]),
        ("sacn_gap", Protocol.SACN, [1, 2, 10]),
        ("sacn_dup_reorder", Protocol.SACN, [10, 10, 9, 10]),
        ("artnet_burst", Protocol.ARTNET, [1, 2, 5, 6, 10]),
        ("artnet_gap", Protocol.ARTNET, [1, 2, 10]),
    ]
    written = []
    for name, protocol, sequences in captures:
        path = root / name / "input.pcapng"
        write_capture(path, protocol, sequences)
        written.append(path)

    flow_path = root / "flow_peak_and_maxgap" / "input.pcapng"
    write_flow_capture(flow_path, [0, 200_000, 400_000, 2_000_000], 10)
    written.append(flow_path)
    return written


def main(argv: Sequence[str] | None = None) -> int:
    """Write the fixture captures; returns a process exit status."""
    parser = argparse.ArgumentParser(description="Write synthetic PCAPNG fixture captures.")
    parser.add_argument(
        "root",
        nargs="?",
        default=str(Path("tests") / "golden"),
        help="directory that receives one sub-directory per fixture",
    )
    args = parser.parse_args(argv)
    try:
        write_all_fixtures(args.root)
    except OSError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0