"""Tracelink: W3C traceparent encoding, decoding and trace ID generation."""

from tracelink import config, errors, runtime_config
from tracelink.context import (
    TraceparentPropagator,
    extract_trace_context,
    extract_traceparent,
    extract_tracestate,
    format_traceparent,
    format_tracestate,
    inject_trace_context,
    inject_traceparent,
    inject_tracestate,
    parse_trace_context,
    parse_traceparent,
    parse_tracestate,
)
from tracelink.errors import (
    ConfigError,
    FlagsDecodeError,
    GenerationError,
    InvalidFormatError,
    InvalidSpanIDFormatError,
    InvalidVersionError,
    SpanIDDecodeError,
    TraceIDDecodeError,
    TracelinkError,
    TraceparentError,
    TraceStateError,
    ValidationError,
)
from tracelink.tracer import (
    TraceContext,
    TraceFlags,
    from_otel_span_context,
    new_child,
    new_span_id,
    new_trace,
    new_trace_id,
    to_otel_span_context,
    with_new_parent_id,
)
from tracelink.tracer.span_context import (
    INVALID_PARENT_ID,
    SAMPLED_FLAG,
    TRACEPARENT_HEADER,
    TRACEPARENT_VERSION,
    TRACESTATE_HEADER,
)

__version__ = "0.1.0"


def init(config_file=None, **overrides) -> config.TracelinkConfig:
    """
    Load configuration from file/env/overrides and apply it to the runtime.

    Returns the validated config.
    """
    cfg = config.load_config(config_file=config_file, overrides=overrides or None)
    runtime_config.configure(cfg)
    return cfg


# Short aliases for the codec entry points
encode = format_traceparent
decode = parse_traceparent

__all__ = [
    "__version__",
    "init",
    "encode",
    "decode",
    "TraceContext",
    "TraceFlags",
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
    "new_trace",
    "new_trace_id",
    "new_span_id",
    "new_child",
    "with_new_parent_id",
    "to_otel_span_context",
    "from_otel_span_context",
    "TRACEPARENT_VERSION",
    "SAMPLED_FLAG",
    "INVALID_PARENT_ID",
    "TRACEPARENT_HEADER",
    "TRACESTATE_HEADER",
    "TracelinkError",
    "ConfigError",
    "ValidationError",
    "TraceparentError",
    "InvalidFormatError",
    "InvalidVersionError",
    "TraceIDDecodeError",
    "SpanIDDecodeError",
    "FlagsDecodeError",
    "TraceStateError",
    "InvalidSpanIDFormatError",
    "GenerationError",
]
