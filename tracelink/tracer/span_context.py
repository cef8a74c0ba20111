"""Immutable trace metadata carried by the traceparent header."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Optional

from tracelink.errors import ValidationError

TRACEPARENT_VERSION = "00"
SAMPLED_FLAG = "01"
INVALID_PARENT_ID = "0000000000000000"
INVALID_TRACE_ID = "00000000000000000000000000000000"

TRACEPARENT_HEADER = "traceparent"
TRACESTATE_HEADER = "tracestate"

TRACE_ID_BYTES = 16
SPAN_ID_BYTES = 8


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class TraceFlags(enum.IntFlag):
    DEFAULT = 0x00
    SAMPLED = 0x01


@dataclass(frozen=True)
class TraceContext:
    """
    Decoded traceparent value.

    Identifiers are stored as raw bytes and only rendered as hex when
    serialized. ``remote`` records where the value came from and does not
    take part in equality.
    """

    trace_id: bytes
    span_id: bytes
    flags: int = TraceFlags.SAMPLED
    version: int = 0
    trace_state: Optional[str] = None
    remote: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.trace_id, bytes) or len(self.trace_id) != TRACE_ID_BYTES:
            raise ValidationError(
                f"trace_id must be {TRACE_ID_BYTES} bytes",
                {"trace_id": repr(self.trace_id)},
            )
        if not isinstance(self.span_id, bytes) or len(self.span_id) != SPAN_ID_BYTES:
            raise ValidationError(
                f"span_id must be {SPAN_ID_BYTES} bytes",
                {"span_id": repr(self.span_id)},
            )
        if not _is_int(self.flags) or not 0 <= self.flags <= 0xFF:
            raise ValidationError("flags must be an int that fits in one byte", {"flags": repr(self.flags)})
        # 0xff is reserved as an invalid version by W3C Trace Context
        if not _is_int(self.version) or not 0 <= self.version < 0xFF:
            raise ValidationError("version must be an int in range 0x00-0xfe", {"version": repr(self.version)})

    @property
    def trace_id_hex(self) -> str:
        return self.trace_id.hex()

    @property
    def span_id_hex(self) -> str:
        return self.span_id.hex()

    @property
    def flags_hex(self) -> str:
        return format(int(self.flags), "02x")

    @property
    def version_hex(self) -> str:
        return format(int(self.version), "02x")

    @property
    def sampled(self) -> bool:
        return bool(int(self.flags) & TraceFlags.SAMPLED)

    @property
    def has_parent(self) -> bool:
        return self.span_id_hex != INVALID_PARENT_ID

    def is_valid(self) -> bool:
        return self.trace_id_hex != INVALID_TRACE_ID and self.has_parent

    def with_new_parent_id(self, span_id: str) -> "TraceContext":
        from tracelink.tracer.id_generator import with_new_parent_id

        return with_new_parent_id(self, span_id)

    def with_trace_state(self, trace_state: Optional[str]) -> "TraceContext":
        return replace(self, trace_state=trace_state or None)

    def __str__(self) -> str:
        from tracelink.context.propagators import format_traceparent

        return format_traceparent(self)
