# liveshark

Building blocks for looking at show-control network traffic: decoding of
Art-Net (ArtDMX) and sACN (E1.31) DMX payloads, a report data model with
stable JSON output, and a writer for synthetic PCAPNG captures. It uses only
the standard library.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Modules

- `liveshark.artnet`: `parse_artdmx(payload)` decodes an ArtDMX UDP payload
  into an `ArtDmx` (`universe`, `sequence`, `slots`). It returns `None` when
  the payload does not carry the Art-Net signature, and raises an
  `ArtNetError` subclass (`TooShortError`, `UnsupportedOpCodeError`,
  `InvalidUniverseIdError`, `InvalidDmxLengthError`) when it is malformed.
  The universe must fit in 15 bits and the DMX length must be even and within
  2..512. A sequence byte of zero is reported as `None`. `ArtNetReader` gives
  bounds-checked reads over a payload.
- `liveshark.sacn`: `parse_sacn_dmx(payload)` decodes an sACN DMX payload
  into a `SacnDmx` (`universe`, `cid` as lowercase hex, `source_name`,
  `sequence`, `slots`). It returns `None` when the preamble and postamble
  sizes do not match sACN, and raises a `SacnError` subclass when the ACN
  PID, a vector, the start code or the property value count is wrong.
- `liveshark.sacn_reader`: the sACN byte layout constants, the `SacnError`
  family and `SacnReader`, the bounds-checked reader `parse_sacn_dmx` uses.
- `liveshark.common`: `optional_nonzero_u8(value)`, which maps a zero byte
  to `None`.
- `liveshark.report`: the report data model (`Report`, `ToolInfo`,
  `InputInfo`, `CaptureSummary`, `UniverseSummary`, `SourceSummary`,
  `FlowSummary`, `ConflictSummary`, `ComplianceSummary`, `Violation`) and
  `make_stub_report(input_path, input_bytes)`. `Report.to_dict()` and
  `Report.to_json()` leave out optional fields that are `None`, and empty
  `examples` lists of violations.
- `liveshark.fixtures`: builds Ethernet/IPv4/UDP frames carrying Art-Net,
  sACN or plain UDP payloads and writes them as big-endian PCAPNG captures
  (`build_artnet_payload`, `build_sacn_payload`, `build_ipv4_udp_packet`,
  `write_pcapng`, `write_capture`, `write_flow_capture`,
  `write_all_fixtures`).

## Decoding a payload

```python
from liveshark.artnet import ArtNetError, parse_artdmx
from liveshark.fixtures import build_artnet_payload

payload = build_artnet_payload(sequence=1, slots=b"\x10\x20", universe=1)
try:
    frame = parse_artdmx(payload)
except ArtNetError as err:
    print("malformed Art-Net:", err)
else:
    if frame is not None:
        print(frame.universe, frame.sequence, frame.slots)
```

## Building a report skeleton

```python
from liveshark.report import make_stub_report

report = make_stub_report("capture.pcapng", 1024)
print(report.to_json())
```

## Generating fixture captures

```
liveshark-fixtures [ROOT]
```

This writes the `sacn_burst`, `sacn_gap`, `sacn_dup_reorder`,
`artnet_burst`, `artnet_gap` and `flow_peak_and_maxgap` captures, each as
`ROOT/<name>/input.pcapng`, creating the directories it needs. `ROOT`
defaults to `tests/golden` under the current directory. The command exits
with status 1 and prints the error if a file cannot be written.

## What it does not do

The package writes PCAPNG captures but does not read PCAP or PCAPNG files,
and it has no analysis pipeline: nothing here turns a capture into a filled
`Report`. Frame reconstruction, per-universe metrics, flow statistics,
conflict detection and compliance checks are not computed; the report
classes only describe and serialize such results.