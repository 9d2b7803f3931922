import struct

import pytest

from liveshark import artnet, fixtures
from liveshark import sacn_reader
from liveshark.artnet import parse_artdmx
from liveshark.fixtures import Protocol
from liveshark.sacn import parse_sacn_dmx

UDP_PAYLOAD_OFFSET = 14 + 20 + 8


def _read_blocks(data):
    blocks = []
    pos = 0
    while pos < len(data):
        block_type, total_len = struct.unpack_from(">II", data, pos)
        (trailing,) = struct.unpack_from(">I", data, pos + total_len - 4)
        assert trailing == total_len
        blocks.append((block_type, data[pos + 8 : pos + total_len - 4]))
        pos += total_len
    assert pos == len(data)
    return blocks


def _read_packets(path):
    packets = []
    for block_type, body in _read_blocks(path.read_bytes()):
        if block_type != fixtures.PCAPNG_ENHANCED_PACKET:
            continue
        if_id, ts_high, ts_low, cap_len, orig_len = struct.unpack_from(">IIIII", body)
        assert if_id == 0
        assert cap_len == orig_len
        packets.append(((ts_high << 32) | ts_low, body[20 : 20 + cap_len]))
    return packets


def test_cid_bytes_counts_up():
    assert fixtures.cid_bytes() == bytes(range(16))


def test_parse_ipv4_valid_and_lenient():
    assert fixtures.parse_ipv4("10.0.0.1") == bytes([10, 0, 0, 1])
    assert fixtures.parse_ipv4("10.x.300.2") == bytes([10, 0, 0, 2])
    assert fixtures.parse_ipv4("192.168") == bytes([192, 168, 0, 0])


def test_parse_ipv4_too_many_parts():
    with pytest.raises(ValueError):
        fixtures.parse_ipv4("1.2.3.4.5")


def test_ipv4_checksum_worked_example():
    header = bytes.fromhex("450000730000400040110000c0a80001c0a800c7")
    assert fixtures.ipv4_checksum(header) == 0xB861


def test_ipv4_checksum_odd_length_rejected():
    with pytest.raises(ValueError):
        fixtures.ipv4_checksum(b"\x45\x00\x00")


def test_ipv4_udp_packet_layout():
    payload = b"hello"
    frame = fixtures.build_ipv4_udp_packet("10.0.0.1", "10.0.0.2", 1000, 2000, payload)
    assert struct.unpack_from(">H", frame, 12)[0] == fixtures.ETHERTYPE_IPV4
    ip_header = frame[14:34]
    assert ip_header[0] == 0x45
    assert ip_header[8] == 64
    assert ip_header[9] == fixtures.UDP_PROTO
    assert struct.unpack_from(">H", ip_header, 2)[0] == len(frame) - 14
    assert ip_header[12:16] == bytes([10, 0, 0, 1])
    assert ip_header[16:20] == bytes([10, 0, 0, 2])
    assert fixtures.ipv4_checksum(ip_header) == 0
    src, dst, udp_len, csum = struct.unpack_from(">HHHH", frame, 34)
    assert (src, dst, csum) == (1000, 2000, 0)
    assert udp_len == len(payload) + 8
    assert frame[UDP_PAYLOAD_OFFSET:] == payload


def test_artnet_payload_round_trip():
    payload = fixtures.build_artnet_payload(7, [7, 0], 1)
    parsed = parse_artdmx(payload)
    assert parsed.universe == 1
    assert parsed.sequence == 7
    assert parsed.slots == bytes([7, 0])
    assert payload[: len(artnet.ARTNET_ID)] == artnet.ARTNET_ID


def test_artnet_payload_truncates_to_max_slots():
    payload = fixtures.build_artnet_payload(1, bytes(600), 3)
    assert len(payload) == artnet.DMX_DATA_OFFSET + artnet.DMX_MAX_SLOTS
    assert len(parse_artdmx(payload).slots) == artnet.DMX_MAX_SLOTS


def test_sacn_payload_round_trip():
    payload = fixtures.build_sacn_payload(9, bytes([9, 0]), 1)
    parsed = parse_sacn_dmx(payload)
    assert parsed.universe == 1
    assert parsed.sequence == 9
    assert parsed.slots == bytes([9, 0])
    assert parsed.cid == fixtures.cid_bytes().hex()
    assert parsed.source_name is None


def test_sacn_payload_truncates_to_max_slots():
    payload = fixtures.build_sacn_payload(1, bytes(700), 2)
    assert len(payload) == sacn_reader.DMX_DATA_OFFSET + sacn_reader.DMX_MAX_SLOTS
    assert len(parse_sacn_dmx(payload).slots) == sacn_reader.DMX_MAX_SLOTS


def test_pcapng_block_lengths():
    block = fixtures.pcapng_block(6, b"abcd")
    assert struct.unpack_from(">I", block, 0)[0] == 6
    assert struct.unpack_from(">I", block, 4)[0] == len(block)
    assert block[-4:] == block[4:8]
    assert block[8:-4] == b"abcd"


def test_write_pcapng_structure(tmp_path):
    path = tmp_path / "out.pcapng"
    fixtures.write_pcapng(path, [(1_500_000, b"abc"), ((1 << 32) + 5, b"defgh")])
    data = path.read_bytes()
    assert data[:4] == bytes([0x0A, 0x0D, 0x0D, 0x0A])
    blocks = _read_blocks(data)
    assert [t for t, _ in blocks] == [0x0A0D0D0A, 1, 6, 6]
    assert struct.unpack_from(">I", blocks[0][1])[0] == fixtures.PCAPNG_BYTE_ORDER_MAGIC
    assert struct.unpack_from(">H", blocks[1][1])[0] == fixtures.LINKTYPE_ETHERNET
    assert all(len(body) % 4 == 0 for _, body in blocks)
    assert _read_packets(path) == [(1_500_000, b"abc"), ((1 << 32) + 5, b"defgh")]


@pytest.mark.parametrize(
    ("protocol", "parse"),
    [(Protocol.SACN, parse_sacn_dmx), (Protocol.ARTNET, parse_artdmx)],
)
def test_write_capture_round_trip(tmp_path, protocol, parse):
    path = tmp_path / "nested" / "input.pcapng"
    sequences = [1, 2, 5]
    fixtures.write_capture(path, protocol, sequences)
    packets = _read_packets(path)
    assert [ts for ts, _ in packets] == [0, 1_000_000, 2_000_000]
    for (_, frame), seq in zip(packets, sequences):
        assert struct.unpack_from(">HH", frame, 34) == (protocol.port, protocol.port)
        parsed = parse(frame[UDP_PAYLOAD_OFFSET:])
        assert parsed.sequence == seq
        assert parsed.universe == 1
        assert parsed.slots == bytes([seq, 0])


def test_write_flow_capture(tmp_path):
    path = tmp_path / "flow" / "input.pcapng"
    timestamps = [0, 200_000, 400_000, 2_000_000]
    fixtures.write_flow_capture(path, timestamps, 10)
    packets = _read_packets(path)
    assert [ts for ts, _ in packets] == timestamps
    for _, frame in packets:
        assert struct.unpack_from(">HH", frame, 34) == (1000, 2000)
        assert frame[UDP_PAYLOAD_OFFSET:] == b"\x42" * 10


def test_write_all_fixtures(tmp_path):
    written = fixtures.write_all_fixtures(tmp_path)
    names = [p.parent.name for p in written]
    assert names == [
        "sacn_burst",
        "sacn_gap",
        "sacn_dup_reorder",
        "artnet_burst",
        "artnet_gap",
        "flow_peak_and_maxgap",
    ]
    assert all(p.is_file() for p in written)
    dup = _read_packets(tmp_path / "sacn_dup_reorder" / "input.pcapng")
    seqs = [parse_sacn_dmx(frame[UDP_PAYLOAD_OFFSET:]).sequence for _, frame in dup]
    assert seqs == [10, 10, 9, 10]


def test_main_writes_fixtures(tmp_path):
    assert fixtures.main([str(tmp_path)]) == 0
    assert (tmp_path / "artnet_gap" / "input.pcapng").is_file()
    assert len(_read_packets(tmp_path / "artnet_gap" / "input.pcapng")) == 3


def test_main_reports_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    assert fixtures.main([str(blocker)]) == 1