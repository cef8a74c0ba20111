"""Trace/span identifier generation and parent-id derivation."""

from __future__ import annotations

import logging
import re
import secrets
import time
import uuid
from dataclasses import replace
from typing import Callable, Optional

from tracelink.errors import GenerationError, InvalidSpanIDFormatError
from tracelink.tracer.span_context import (
    INVALID_PARENT_ID,
    SPAN_ID_BYTES,
    TRACE_ID_BYTES,
    TraceContext,
    TraceFlags,
)

logger = logging.getLogger("tracelink.ids")

_SPAN_ID_PATTERN = re.compile(r"[0-9a-f]{16}")

IdSource = Callable[[], bytes]


def _uuid7() -> uuid.UUID:
    if hasattr(uuid, "uuid7"):
        return uuid.uuid7()  # type: ignore[attr-defined]
    # RFC 9562 layout: 48-bit unix ms timestamp, version, 74 random bits
    unix_ms = time.time_ns() // 1_000_000
    value = (unix_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= 0x7 << 76
    value |= secrets.randbits(12) << 64
    value |= 0b10 << 62
    value |= secrets.randbits(62)
    return uuid.UUID(int=value)


def new_trace_id() -> bytes:
    """Return a 16-byte, time-ordered (UUIDv7) trace ID."""
    return _uuid7().bytes


def new_span_id() -> bytes:
    """Return a random, non-zero 8-byte span ID."""
    while True:
        span_id = secrets.token_bytes(SPAN_ID_BYTES)
        if any(span_id):
            return span_id


def new_trace(id_source: Optional[IdSource] = None) -> TraceContext:
    """
    Start a new trace.

    The result carries a fresh trace ID, the invalid-parent sentinel as its
    span ID and the sampled flag.

    Args:
        id_source: callable returning a 16-byte trace ID (defaults to UUIDv7)

    Raises:
        GenerationError: if the ID source fails or returns an unusable value
    """
    source = id_source or new_trace_id
    try:
        trace_id = source()
    except Exception as e:
        logger.warning("Trace ID generation failed: %s", e)
        raise GenerationError("Failed to generate trace ID", {"error": e}) from e

    if not isinstance(trace_id, bytes) or len(trace_id) != TRACE_ID_BYTES:
        raise GenerationError("Trace ID source returned a malformed value", {"trace_id": repr(trace_id)})
    if not any(trace_id):
        raise GenerationError("Trace ID source returned the all-zero ID", {"trace_id": trace_id.hex()})

    return TraceContext(
        trace_id=trace_id,
        span_id=bytes.fromhex(INVALID_PARENT_ID),
        flags=TraceFlags.SAMPLED,
    )


def with_new_parent_id(context: TraceContext, span_id: str) -> TraceContext:
    """
    Return a copy of ``context`` with its parent-id replaced.

    Raises:
        InvalidSpanIDFormatError: unless ``span_id`` is exactly 16 lowercase hex digits
    """
    if not isinstance(span_id, str) or not _SPAN_ID_PATTERN.fullmatch(span_id):
        raise InvalidSpanIDFormatError("Invalid span ID format", {"span_id": span_id})
    return replace(context, span_id=bytes.fromhex(span_id))


def new_child(context: TraceContext) -> TraceContext:
    """Derive a context for a new child span with a freshly generated span ID."""
    return with_new_parent_id(context, new_span_id().hex())
