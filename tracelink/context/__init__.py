"""Trace context propagation: traceparent codec and carrier helpers."""

from tracelink.context.propagators import (
    extract_trace_context,
    extract_tracestate,
    extract_traceparent,
    format_traceparent,
    format_tracestate,
    inject_trace_context,
    inject_traceparent,
    inject_tracestate,
    parse_trace_context,
    parse_tracestate,
    parse_traceparent,
)
from tracelink.context.otel_propagator import TraceparentPropagator

__all__ = [
    "format_traceparent",
    "parse_traceparent",
    "parse_trace_context",
    "format_tracestate",
    "parse_tracestate",
    "inject_traceparent",
    "inject_tracestate",
    "inject_trace_context",
    "extract_traceparent",
    "extract_tracestate",
    "extract_trace_context",
    "TraceparentPropagator",
]
