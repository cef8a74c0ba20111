"""Tests for trace ID generation and parent-id derivation."""

import logging
import re
import unittest
import uuid

import pytest

from tracelink.context import format_traceparent, parse_traceparent
from tracelink.errors import GenerationError, InvalidSpanIDFormatError
from tracelink.tracer.id_generator import (
    _uuid7,
    new_child,
    new_span_id,
    new_trace,
    new_trace_id,
    with_new_parent_id,
)
from tracelink.tracer.span_context import INVALID_PARENT_ID, SAMPLED_FLAG, TraceContext

LOWER_HEX_32 = re.compile(r"[0-9a-f]{32}")
EXAMPLE = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"


class TestNewTrace(unittest.TestCase):
    def test_generated_traces_are_unique(self):
        traces = [new_trace() for _ in range(10_000)]
        trace_ids = {ctx.trace_id_hex for ctx in traces}

        self.assertEqual(len(trace_ids), 10_000)
        for ctx in traces:
            self.assertRegex(ctx.trace_id_hex, LOWER_HEX_32)
            self.assertEqual(ctx.span_id_hex, INVALID_PARENT_ID)
            self.assertEqual(ctx.flags_hex, SAMPLED_FLAG)
            self.assertEqual(ctx.version_hex, "00")

    def test_new_trace_has_no_parent(self):
        ctx = new_trace()
        self.assertFalse(ctx.has_parent)
        self.assertTrue(ctx.sampled)
        self.assertFalse(ctx.remote)

    def test_new_trace_serializes(self):
        header = format_traceparent(new_trace())
        self.assertEqual(len(header), 55)
        self.assertTrue(header.startswith("00-"))
        self.assertTrue(header.endswith("-0000000000000000-01"))

    def test_trace_ids_are_uuid_v7(self):
        trace_id = new_trace_id()
        self.assertEqual(uuid.UUID(bytes=trace_id).version, 7)

    def test_uuid7_layout(self):
        value = _uuid7()
        self.assertEqual(value.version, 7)
        self.assertEqual(value.variant, uuid.RFC_4122)

    def test_trace_ids_are_time_ordered(self):
        first = new_trace_id()
        second = new_trace_id()
        # 48-bit millisecond timestamp prefix
        self.assertLessEqual(first[:6], second[:6])

    def test_source_failure_is_wrapped(self):
        def broken_source():
            raise OSError("entropy unavailable")

        log_capture = []
        handler = logging.Handler()
        handler.emit = lambda record: log_capture.append(record)
        logger = logging.getLogger("tracelink.ids")
        logger.addHandler(handler)
        try:
            with self.assertRaises(GenerationError) as cm:
                new_trace(id_source=broken_source)
        finally:
            logger.removeHandler(handler)

        self.assertIsInstance(cm.exception.__cause__, OSError)
        self.assertIn("entropy unavailable", str(cm.exception))
        self.assertTrue(any("generation failed" in r.getMessage() for r in log_capture))

    def test_zero_trace_id_rejected(self):
        with self.assertRaises(GenerationError):
            new_trace(id_source=lambda: bytes(16))

    def test_malformed_trace_id_rejected(self):
        with self.assertRaises(GenerationError):
            new_trace(id_source=lambda: b"\x01" * 8)

    def test_custom_source(self):
        ctx = new_trace(id_source=lambda: b"\xab" * 16)
        self.assertEqual(ctx.trace_id_hex, "ab" * 16)


class TestWithNewParentID:
    def test_replaces_only_span_id(self):
        ctx = parse_traceparent(EXAMPLE)
        derived = with_new_parent_id(ctx, "b7ad6b7169203331")

        assert derived.span_id_hex == "b7ad6b7169203331"
        assert derived.trace_id == ctx.trace_id
        assert derived.version == ctx.version
        assert derived.flags == ctx.flags
        assert format_traceparent(derived) == "00-4bf92f3577b34da6a3ce929d0e0e4736-b7ad6b7169203331-01"

    def test_source_is_untouched(self):
        ctx = parse_traceparent(EXAMPLE)
        with_new_parent_id(ctx, "b7ad6b7169203331")

        assert format_traceparent(ctx) == EXAMPLE

    def test_method_form(self):
        ctx = new_trace()
        derived = ctx.with_new_parent_id("b7ad6b7169203331")

        assert derived.trace_id == ctx.trace_id
        assert derived.has_parent
        assert not ctx.has_parent

    def test_trace_state_and_remote_carried(self):
        ctx = TraceContext(trace_id=b"\x01" * 16, span_id=b"\x02" * 8, trace_state="a=b", remote=True)
        derived = with_new_parent_id(ctx, "0123456789abcdef")

        assert derived.trace_state == "a=b"
        assert derived.remote is True

    @pytest.mark.parametrize(
        "span_id",
        [
            "not-hex!!",
            "",
            "b7ad6b716920333",
            "b7ad6b71692033311",
            "B7AD6B7169203331",
            "b7ad6b716920333g",
            " b7ad6b7169203331",
            "b7ad6b7169203331\n",
            None,
            12345,
        ],
    )
    def test_invalid_span_ids(self, span_id):
        ctx = parse_traceparent(EXAMPLE)
        with pytest.raises(InvalidSpanIDFormatError) as exc_info:
            with_new_parent_id(ctx, span_id)
        assert exc_info.value.details["span_id"] == span_id


class TestNewChild:
    def test_child_keeps_trace_identity(self):
        parent = parse_traceparent(EXAMPLE)
        child = new_child(parent)

        assert child.trace_id == parent.trace_id
        assert child.flags == parent.flags
        assert child.span_id != parent.span_id
        assert child.has_parent

    def test_span_ids_are_nonzero_and_distinct(self):
        span_ids = {new_span_id() for _ in range(1000)}
        assert len(span_ids) == 1000
        assert all(len(s) == 8 and any(s) for s in span_ids)
