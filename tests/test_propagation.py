"""Tests for tracestate handling and header carrier helpers."""

import logging

import pytest

from tracelink.context import (
    extract_trace_context,
    extract_traceparent,
    extract_tracestate,
    format_tracestate,
    inject_trace_context,
    inject_traceparent,
    inject_tracestate,
    parse_tracestate,
)
from tracelink.errors import TraceStateError
from tracelink.tracer.span_context import TraceContext

TRACEPARENT = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"


class TestTraceState:
    def test_parse_preserves_order(self):
        parsed = parse_tracestate("rojo=00f067aa0ba902b7,congo=t61rcWkgMzE")
        assert list(parsed.items()) == [("rojo", "00f067aa0ba902b7"), ("congo", "t61rcWkgMzE")]

    @pytest.mark.parametrize("header", [None, "", ",", " , "])
    def test_parse_empty(self, header):
        assert parse_tracestate(header) == {}

    @pytest.mark.parametrize("header", ["UPPER=1", "novalue", "a=1,a=2", "a=1,=2"])
    def test_parse_invalid(self, header):
        with pytest.raises(TraceStateError) as exc_info:
            parse_tracestate(header)
        assert exc_info.value.details["tracestate"] == header

    def test_format(self):
        assert format_tracestate({"rojo": "00f067aa0ba902b7", "congo": "t61rcWkgMzE"}) == (
            "rojo=00f067aa0ba902b7,congo=t61rcWkgMzE"
        )

    def test_format_empty(self):
        assert format_tracestate({}) == ""

    def test_format_invalid(self):
        with pytest.raises(TraceStateError):
            format_tracestate({"Bad Key": "value"})


class TestCarrierHelpers:
    def test_inject_traceparent(self):
        ctx = TraceContext(trace_id=b"\x01" * 16, span_id=b"\x02" * 8)
        headers = {}
        inject_traceparent(headers, ctx)
        assert headers == {"traceparent": "00-" + "01" * 16 + "-" + "02" * 8 + "-01"}

    def test_inject_tracestate_only_when_present(self):
        headers = {}
        inject_tracestate(headers, TraceContext(trace_id=b"\x01" * 16, span_id=b"\x02" * 8))
        assert headers == {}

        inject_tracestate(headers, TraceContext(trace_id=b"\x01" * 16, span_id=b"\x02" * 8, trace_state="k=v"))
        assert headers == {"tracestate": "k=v"}

    def test_inject_trace_context_returns_headers(self):
        headers = {"accept": "application/json"}
        ctx = TraceContext(trace_id=b"\x01" * 16, span_id=b"\x02" * 8, trace_state="k=v")
        result = inject_trace_context(headers, ctx)

        assert result is headers
        assert set(headers) == {"accept", "traceparent", "tracestate"}

    def test_extract_is_case_insensitive(self):
        headers = {"TraceParent": TRACEPARENT, "TRACESTATE": "k=v"}

        assert extract_tracestate(headers) == "k=v"
        ctx = extract_trace_context(headers)
        assert ctx is not None
        assert ctx.trace_state == "k=v"
        assert ctx.remote is True

    def test_extract_missing_header(self):
        assert extract_traceparent({}) is None
        assert extract_trace_context({"tracestate": "k=v"}) is None
        assert extract_tracestate({}) is None

    def test_extract_invalid_header_logs_and_returns_none(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="tracelink.propagation"):
            assert extract_traceparent({"traceparent": "garbage"}) is None
        assert any("garbage" in record.getMessage() for record in caplog.records)

    def test_extract_invalid_tracestate_drops_whole_context(self):
        assert extract_trace_context({"traceparent": TRACEPARENT, "tracestate": "not valid"}) is None

    def test_extract_then_inject_round_trip(self):
        inbound = {"traceparent": TRACEPARENT, "tracestate": "rojo=00f067aa0ba902b7"}
        outbound = inject_trace_context({}, extract_trace_context(inbound))
        assert outbound == inbound
