"""Helper functions for identifier conversion and OpenTelemetry compatibility."""

from __future__ import annotations

import re
from typing import Optional

_LOWER_HEX = re.compile(r"[0-9a-f]*")


def is_lower_hex(value: str, width: Optional[int] = None) -> bool:
    """
    Check that ``value`` consists only of lowercase hex digits.

    Args:
        value: candidate string
        width: exact number of characters required, if any
    """
    if not isinstance(value, str):
        return False
    if width is not None and len(value) != width:
        return False
    return _LOWER_HEX.fullmatch(value) is not None


def trace_id_to_int(trace_id: bytes) -> int:
    """Convert a 16-byte trace ID to the int form OpenTelemetry uses."""
    return int.from_bytes(trace_id, "big")


def span_id_to_int(span_id: bytes) -> int:
    """Convert an 8-byte span ID to the int form OpenTelemetry uses."""
    return int.from_bytes(span_id, "big")


def trace_id_from_int(trace_id: int) -> bytes:
    return trace_id.to_bytes(16, "big")


def span_id_from_int(span_id: int) -> bytes:
    return span_id.to_bytes(8, "big")
