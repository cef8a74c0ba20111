"""Adapters between Tracelink TraceContext and OpenTelemetry SpanContext."""

from __future__ import annotations

from typing import Optional

from opentelemetry.trace import SpanContext as OTelSpanContext
from opentelemetry.trace import TraceFlags as OTelTraceFlags
from opentelemetry.trace import TraceState

from tracelink.tracer.span_context import TraceContext
from tracelink.utils.helpers import (
    span_id_from_int,
    span_id_to_int,
    trace_id_from_int,
    trace_id_to_int,
)


def to_otel_span_context(context: TraceContext) -> OTelSpanContext:
    """
    Convert a TraceContext to an OpenTelemetry SpanContext.

    The tracestate string is parsed into an OTel ``TraceState``; the
    traceparent version has no OTel counterpart and is dropped.
    """
    trace_state = TraceState()
    if context.trace_state:
        trace_state = TraceState.from_header([context.trace_state])

    return OTelSpanContext(
        trace_id=trace_id_to_int(context.trace_id),
        span_id=span_id_to_int(context.span_id),
        is_remote=context.remote,
        trace_flags=OTelTraceFlags(int(context.flags)),
        trace_state=trace_state,
    )


def from_otel_span_context(
    otel_context: OTelSpanContext,
    trace_state: Optional[str] = None,
) -> TraceContext:
    """
    Convert an OpenTelemetry SpanContext to a TraceContext.

    Args:
        otel_context: OTel span context
        trace_state: raw tracestate header to carry instead of re-serializing
            the OTel ``TraceState``
    """
    if trace_state is None and otel_context.trace_state:
        trace_state = otel_context.trace_state.to_header()

    return TraceContext(
        trace_id=trace_id_from_int(otel_context.trace_id),
        span_id=span_id_from_int(otel_context.span_id),
        flags=int(otel_context.trace_flags),
        trace_state=trace_state or None,
        remote=otel_context.is_remote,
    )
