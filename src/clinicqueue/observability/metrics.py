"""
Custom metrics for the clinic queue using OpenTelemetry.

Counts transitions by outcome, audit-trail gaps and dropped side effects.
"""
import logging
from typing import Optional

from opentelemetry import metrics
from opentelemetry.metrics import Counter

logger = logging.getLogger(__name__)

meter = metrics.get_meter("clinicqueue")

# Initialize custom metrics (lazy initialization)
_metrics_initialized = False
_transition_counter: Optional[Counter] = None
_audit_write_failure_counter: Optional[Counter] = None
_side_effect_failure_counter: Optional[Counter] = None


def _initialize_metrics():
    """Initialize custom metrics instruments."""
    global _metrics_initialized, _transition_counter
    global _audit_write_failure_counter, _side_effect_failure_counter

    if _metrics_initialized:
        return

    _transition_counter = meter.create_counter(
        name="clinicqueue.queue.transitions",
        description="Queue transitions attempted, by action and outcome",
        unit="1",
    )
    _audit_write_failure_counter = meter.create_counter(
        name="clinicqueue.queue.audit_write_failures",
        description="Status changes stored without their journey step",
        unit="1",
    )
    _side_effect_failure_counter = meter.create_counter(
        name="clinicqueue.queue.side_effect_failures",
        description="Notifications or activity logs dropped after failing",
        unit="1",
    )
    _metrics_initialized = True


def record_transition(action: str, outcome: str):
    """
    Record a queue transition attempt.

    Args:
        action: Queue action name (call, start, requeue, ...)
        outcome: ok, invalid_transition, conflict or persistence_error
    """
    _initialize_metrics()
    _transition_counter.add(1, {"action": action, "outcome": outcome})


def record_audit_write_failure(step_type: str):
    """Record a journey step that could not be appended."""
    _initialize_metrics()
    _audit_write_failure_counter.add(1, {"step_type": step_type})


def record_side_effect_failure(kind: str):
    """Record a dropped notification or activity log write."""
    _initialize_metrics()
    _side_effect_failure_counter.add(1, {"kind": kind})
