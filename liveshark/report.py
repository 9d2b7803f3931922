"""Report data model with deterministic, stable-order JSON output."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any

REPORT_VERSION = 1
"""Current report schema version."""

DEFAULT_GENERATED_AT = "1970-01-01T00:00:00Z"
"""Timestamp used when no capture time is available."""

TOOL_NAME = "liveshark"
TOOL_VERSION = "0.1.0"

_SKIP_EMPTY = {"skip_empty": True}


def _serialize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            if f.metadata.get("skip_empty") and not item:
                continue
            out[f.name] = _serialize(item)
        return out
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


@dataclass(kw_only=True)
class ToolInfo:
    """Tool identification embedded in reports."""

    name: str
    version: str


@dataclass(kw_only=True)
class InputInfo:
    """Input capture metadata."""

    path: str
    bytes: int


@dataclass(kw_only=True)
class CaptureSummary:
    """Basic capture summary; timestamps may be absent."""

    packets_total: int
    time_start: str | None = None
    time_end: str | None = None


@dataclass(kw_only=True)
class SourceSummary:
    """A source observed on a universe."""

    source_ip: str
    cid: str | None = None
    source_name: str | None = None


@dataclass(kw_only=True)
class UniverseSummary:
    """Per-universe metrics."""

    universe: int
    proto: str
    sources: list[SourceSummary] = field(default_factory=list)
    fps: float | None = None
    frames_count: int = 0
    loss_packets: int | None = None
    loss_rate: float | None = None
    burst_count: int | None = None
    max_burst_len: int | None = None
    jitter_ms: float | None = None
    dup_packets: int | None = None
    reordered_packets: int | None = None


@dataclass(kw_only=True)
class FlowSummary:
    """Flow-level summary for a UDP endpoint pair."""

    app_proto: str
    src: str
    dst: str
    pps: float | None = None
    bps: float | None = None
    iat_jitter_ms: float | None = None
    max_iat_ms: int | None = None
    pps_peak_1s: int | None = None
    bps_peak_1s: int | None = None


@dataclass(kw_only=True)
class ConflictSummary:
    """Conflict between several sources on one universe."""

    universe: int
    sources: list[str]
    overlap_duration_s: float
    affected_channels: list[int] = field(default_factory=list)
    severity: str
    conflict_score: float


@dataclass(kw_only=True)
class Violation:
    """A single aggregated compliance violation."""

    id: str
    severity: str
    message: str
    count: int
    examples: list[str] = field(default_factory=list, metadata=_SKIP_EMPTY)


@dataclass(kw_only=True)
class ComplianceSummary:
    """Compliance summary for one protocol."""

    protocol: str
    compliance_percentage: float
    violations: list[Violation] = field(default_factory=list)


@dataclass(kw_only=True)
class Report:
    """Aggregated analysis report."""

    report_version: int
    tool: ToolInfo
    generated_at: str
    input: InputInfo
    capture_summary: CaptureSummary | None = None
    universes: list[UniverseSummary] = field(default_factory=list)
    flows: list[FlowSummary] = field(default_factory=list)
    conflicts: list[ConflictSummary] = field(default_factory=list)
    compliance: list[ComplianceSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the report as plain data, omitting absent optional fields."""
        return _serialize(self)

    def to_json(self) -> str:
        """Return the report as compact JSON in field order."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


def make_stub_report(input_path: str, input_bytes: int) -> Report:
    """Build a report with base fields filled and empty aggregates."""
    return Report(
        report_version=REPORT_VERSION,
        tool=ToolInfo(name=TOOL_NAME, version=TOOL_VERSION),
        generated_at=DEFAULT_GENERATED_AT,
        input=InputInfo(path=input_path, bytes=input_bytes),
    )