"""Tracelink error hierarchy and exceptions."""

from __future__ import annotations


class TracelinkError(Exception):
    """Base exception for all Tracelink errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(TracelinkError):
    """Raised when configuration is invalid or conflicting."""
    pass


class ValidationError(TracelinkError):
    """Raised when a trace context value cannot be constructed."""
    pass


class TraceparentError(ValidationError):
    """Base for traceparent/tracestate header errors."""
    pass


class InvalidFormatError(TraceparentError):
    """Raised when a traceparent has the wrong field count or widths."""
    pass


class TraceIDDecodeError(InvalidFormatError):
    """Raised when the trace-id field is not lowercase hex."""
    pass


class SpanIDDecodeError(InvalidFormatError):
    """Raised when the parent-id field is not lowercase hex."""
    pass


class FlagsDecodeError(InvalidFormatError):
    """Raised when the trace-flags field is not lowercase hex."""
    pass


class InvalidVersionError(TraceparentError):
    """Raised when the traceparent version is not supported."""
    pass


class TraceStateError(TraceparentError):
    """Raised when the tracestate header fails to parse."""
    pass


class InvalidSpanIDFormatError(TraceparentError):
    """Raised when a replacement span ID is not 16 lowercase hex digits."""
    pass


class GenerationError(TracelinkError):
    """Raised when a new trace identifier cannot be generated."""
    pass
