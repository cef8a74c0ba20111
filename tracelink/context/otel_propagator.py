"""OpenTelemetry TextMapPropagator backed by the Tracelink traceparent codec."""

from __future__ import annotations

import logging
import typing

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.propagators import textmap

from tracelink.context.propagators import format_traceparent, parse_trace_context
from tracelink.errors import TraceparentError
from tracelink.tracer.otel_adapter import from_otel_span_context, to_otel_span_context
from tracelink.tracer.span_context import TRACEPARENT_HEADER, TRACESTATE_HEADER

logger = logging.getLogger("tracelink.propagation")


class TraceparentPropagator(textmap.TextMapPropagator):
    """
    Drop-in replacement for OTel's TraceContextTextMapPropagator.

    Can be registered with ``opentelemetry.propagate.set_global_textmap``.
    Invalid headers leave the incoming context untouched.
    """

    def extract(
        self,
        carrier: textmap.CarrierT,
        context: typing.Optional[Context] = None,
        getter: textmap.Getter[textmap.CarrierT] = textmap.default_getter,
    ) -> Context:
        if context is None:
            context = Context()

        header = getter.get(carrier, TRACEPARENT_HEADER)
        if not header:
            return context

        tracestate_headers = getter.get(carrier, TRACESTATE_HEADER)
        tracestate = ",".join(tracestate_headers) if tracestate_headers else None

        try:
            trace_context = parse_trace_context(header[0], tracestate)
        except TraceparentError as e:
            logger.debug("Ignoring invalid trace context: %s", e)
            return context

        span = trace.NonRecordingSpan(to_otel_span_context(trace_context))
        return trace.set_span_in_context(span, context)

    def inject(
        self,
        carrier: textmap.CarrierT,
        context: typing.Optional[Context] = None,
        setter: textmap.Setter[textmap.CarrierT] = textmap.default_setter,
    ) -> None:
        span_context = trace.get_current_span(context).get_span_context()
        if not span_context.is_valid:
            return

        trace_context = from_otel_span_context(span_context)
        setter.set(carrier, TRACEPARENT_HEADER, format_traceparent(trace_context))
        if trace_context.trace_state:
            setter.set(carrier, TRACESTATE_HEADER, trace_context.trace_state)

    @property
    def fields(self) -> typing.Set[str]:
        return {TRACEPARENT_HEADER, TRACESTATE_HEADER}
