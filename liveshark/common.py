"""Conventions shared by the protocol readers."""

from __future__ import annotations


def optional_nonzero_u8(value: int) -> int | None:
    """Return ``None`` for a zero byte, otherwise the byte itself."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"byte value out of range: {value}")
    return None if value == 0 else value