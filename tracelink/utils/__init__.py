"""Utility functions for Tracelink."""

from tracelink.utils.helpers import (
    is_lower_hex,
    trace_id_to_int,
    span_id_to_int,
    trace_id_from_int,
    span_id_from_int,
)

__all__ = [
    "is_lower_hex",
    "trace_id_to_int",
    "span_id_to_int",
    "trace_id_from_int",
    "span_id_from_int",
]
