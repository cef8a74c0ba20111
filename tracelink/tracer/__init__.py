"""Trace context value type and identifier generation."""

from tracelink.tracer.id_generator import (
    new_child,
    new_span_id,
    new_trace,
    new_trace_id,
    with_new_parent_id,
)
from tracelink.tracer.otel_adapter import from_otel_span_context, to_otel_span_context
from tracelink.tracer.span_context import TraceContext, TraceFlags

__all__ = [
    "TraceContext",
    "TraceFlags",
    "new_trace",
    "new_trace_id",
    "new_span_id",
    "new_child",
    "with_new_parent_id",
    "to_otel_span_context",
    "from_otel_span_context",
]
