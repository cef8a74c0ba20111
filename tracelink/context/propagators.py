"""W3C traceparent codec and tracestate pass-through.

The traceparent header is parsed by hand; tracestate validation is left to
OpenTelemetry's ``TraceState`` and the raw header string is carried through
unchanged.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, MutableMapping, Optional

from opentelemetry.trace import TraceState

from tracelink import runtime_config
from tracelink.errors import (
    FlagsDecodeError,
    InvalidFormatError,
    InvalidVersionError,
    SpanIDDecodeError,
    TraceIDDecodeError,
    TraceparentError,
    TraceStateError,
)
from tracelink.tracer.span_context import (
    TRACEPARENT_HEADER,
    TRACESTATE_HEADER,
    TraceContext,
)
from tracelink.utils.helpers import is_lower_hex

logger = logging.getLogger("tracelink.propagation")

# version, trace-id, parent-id, trace-flags
_FIELD_WIDTHS = (2, 32, 16, 2)


def format_traceparent(context: TraceContext) -> str:
    """Format traceparent header value: ``version-traceid-parentid-flags``."""
    return "-".join(
        (context.version_hex, context.trace_id_hex, context.span_id_hex, context.flags_hex)
    )


def parse_traceparent(
    header_value: str,
    supported_versions: Optional[Iterable[str]] = None,
) -> TraceContext:
    """
    Parse a traceparent header into a TraceContext.

    Args:
        header_value: raw header value
        supported_versions: accepted version tags; defaults to the runtime config

    Raises:
        InvalidFormatError: wrong field count or widths, or a non-hex field
            (the field-specific subclasses name the offending field)
        InvalidVersionError: well-formed version that is not supported
    """
    if not isinstance(header_value, str):
        raise InvalidFormatError("Invalid traceparent format", {"traceparent": header_value})

    raw = header_value.strip()
    parts = raw.split("-")
    if len(parts) != len(_FIELD_WIDTHS) or any(
        len(part) != width for part, width in zip(parts, _FIELD_WIDTHS)
    ):
        raise InvalidFormatError("Invalid traceparent format", {"traceparent": header_value})

    version, trace_id, span_id, flags = parts

    if not is_lower_hex(version):
        raise InvalidFormatError("Invalid traceparent version field", {"traceparent": header_value})
    if supported_versions is None:
        supported_versions = runtime_config.get_supported_versions()
    if version == "ff" or version not in frozenset(supported_versions):
        raise InvalidVersionError(
            "Invalid traceparent version", {"version": version, "traceparent": header_value}
        )

    if not is_lower_hex(trace_id):
        raise TraceIDDecodeError("Failed to decode trace ID", {"trace_id": trace_id, "traceparent": header_value})
    if not is_lower_hex(span_id):
        raise SpanIDDecodeError("Failed to decode parent ID", {"parent_id": span_id, "traceparent": header_value})
    if not is_lower_hex(flags):
        raise FlagsDecodeError("Failed to decode flags", {"flags": flags, "traceparent": header_value})

    trace_id_bytes = bytes.fromhex(trace_id)
    span_id_bytes = bytes.fromhex(span_id)
    if runtime_config.get_reject_zero_ids() and not (any(trace_id_bytes) and any(span_id_bytes)):
        raise InvalidFormatError("All-zero trace or parent ID", {"traceparent": header_value})

    return TraceContext(
        trace_id=trace_id_bytes,
        span_id=span_id_bytes,
        flags=bytes.fromhex(flags)[0],
        version=int(version, 16),
        remote=True,
    )


def _parse_trace_state(header_value: str) -> TraceState:
    trace_state = TraceState.from_header([header_value])
    has_members = any(member.strip() for member in header_value.split(","))
    # OTel logs and returns an empty TraceState for invalid input
    if has_members and len(trace_state) == 0:
        raise TraceStateError("Failed to parse tracestate", {"tracestate": header_value})
    return trace_state


def parse_tracestate(header_value: Optional[str]) -> Dict[str, str]:
    """
    Parse a tracestate header into an ordered dict.

    Raises:
        TraceStateError: if any list member is malformed or duplicated
    """
    if not header_value:
        return {}
    return dict(_parse_trace_state(header_value).items())


def format_tracestate(state: Mapping[str, str]) -> str:
    """
    Format a tracestate header value from a mapping.

    Raises:
        TraceStateError: if a key or value is not a valid list member
    """
    if not state:
        return ""
    trace_state = TraceState(list(state.items()))
    if len(trace_state) != len(state):
        raise TraceStateError("Invalid tracestate entries", {"tracestate": dict(state)})
    return trace_state.to_header()


def parse_trace_context(
    traceparent: str,
    tracestate: Optional[str] = None,
    supported_versions: Optional[Iterable[str]] = None,
) -> TraceContext:
    """
    Parse traceparent and its companion tracestate into one TraceContext.

    The tracestate string is validated and then kept as-is.

    Raises:
        TraceparentError: any traceparent error, or TraceStateError
    """
    context = parse_traceparent(traceparent, supported_versions=supported_versions)
    if not tracestate or not tracestate.strip():
        return context
    _parse_trace_state(tracestate)
    return context.with_trace_state(tracestate)


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    # Case-insensitive lookup
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def inject_traceparent(headers: MutableMapping[str, str], context: TraceContext) -> None:
    """Inject traceparent header into headers dict."""
    headers[TRACEPARENT_HEADER] = format_traceparent(context)


def inject_tracestate(headers: MutableMapping[str, str], context: TraceContext) -> None:
    """Inject tracestate header if present on the context."""
    if context.trace_state:
        headers[TRACESTATE_HEADER] = context.trace_state


def inject_trace_context(headers: MutableMapping[str, str], context: TraceContext) -> MutableMapping[str, str]:
    """
    Inject both traceparent and tracestate headers.

    Returns the same headers mapping for convenience.
    """
    inject_traceparent(headers, context)
    inject_tracestate(headers, context)
    return headers


def extract_tracestate(headers: Mapping[str, str]) -> Optional[str]:
    """Extract the raw tracestate header value (case-insensitive)."""
    return _get_header(headers, TRACESTATE_HEADER)


def extract_traceparent(headers: Mapping[str, str]) -> Optional[TraceContext]:
    """
    Extract traceparent header from headers and parse it.

    Returns None if the header is missing or invalid.
    """
    header_value = _get_header(headers, TRACEPARENT_HEADER)
    if header_value is None:
        return None
    try:
        return parse_traceparent(header_value)
    except TraceparentError as e:
        logger.debug("Ignoring invalid traceparent: %s", e)
        return None


def extract_trace_context(headers: Mapping[str, str]) -> Optional[TraceContext]:
    """
    Extract both traceparent and tracestate and return a combined TraceContext.

    Returns None if either header is invalid; partial contexts are never returned.
    """
    header_value = _get_header(headers, TRACEPARENT_HEADER)
    if header_value is None:
        return None
    try:
        return parse_trace_context(header_value, extract_tracestate(headers))
    except TraceparentError as e:
        logger.debug("Ignoring invalid trace context: %s", e)
        return None
