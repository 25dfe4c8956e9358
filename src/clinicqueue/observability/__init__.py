"""
Observability module for tracing and metrics.

Provides:
- Custom tracing spans around queue transitions
- Counters for transitions, audit-trail gaps and dropped side effects
"""

from .tracing import (
    trace_operation,
    set_span_status,
    add_span_attribute,
)

from .metrics import (
    record_transition,
    record_audit_write_failure,
    record_side_effect_failure,
)

__all__ = [
    # Tracing
    "trace_operation",
    "set_span_status",
    "add_span_attribute",
    # Metrics
    "record_transition",
    "record_audit_write_failure",
    "record_side_effect_failure",
]
