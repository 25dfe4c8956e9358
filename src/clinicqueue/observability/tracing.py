"""
OpenTelemetry tracing helpers for the clinic queue.

Without a configured SDK the OpenTelemetry API hands out no-op spans, so these
helpers are safe to use unconditionally.
"""
import logging
from contextlib import contextmanager
from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("clinicqueue")


@contextmanager
def trace_operation(operation_name: str, attributes: Optional[dict] = None):
    """
    Context manager for creating custom tracing spans.

    Args:
        operation_name: Name of the operation being traced
        attributes: Optional dictionary of attributes to add to the span

    Example:
        with trace_operation("queue.transition", {"queue.action": "call"}) as span:
            result = await orchestrator.call(entry, actor_id)
    """
    with tracer.start_as_current_span(operation_name) as span:
        if attributes:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, str(value))
        yield span


def set_span_status(span, success: bool, error_message: Optional[str] = None):
    """
    Set the status of a tracing span.

    Args:
        span: OpenTelemetry span object
        success: Whether the operation succeeded
        error_message: Optional error message if operation failed
    """
    if span is None:
        return
    if success:
        span.set_status(Status(StatusCode.OK))
    else:
        span.set_status(Status(StatusCode.ERROR, error_message or "Operation failed"))


def add_span_attribute(span, key: str, value: Any):
    """Add an attribute to a tracing span (value converted to string)."""
    if span is None or value is None:
        return
    span.set_attribute(key, str(value))
