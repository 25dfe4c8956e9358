"""
Queue status and action enums for the patient journey workflow.
"""

from enum import Enum


class QueueStatus(str, Enum):
    """Status of a queue entry (also the journey step type)."""

    WAITING = "waiting"                  # In the waiting room
    CALLED = "called"                    # Called by the team
    IN_CONSULTATION = "in_consultation"  # With the practitioner
    AWAITING_EXAM = "awaiting_exam"      # Sent for a complementary exam
    COMPLETED = "completed"              # Consultation finished
    CLOSED = "closed"                    # Administrative closure
    CANCELLED = "cancelled"              # Justified cancellation
    NO_SHOW = "no_show"                  # Unjustified absence

    @property
    def is_terminal(self) -> bool:
        """Statuses that end the visit (no_show can still be requeued)."""
        return self in (
            QueueStatus.COMPLETED,
            QueueStatus.CLOSED,
            QueueStatus.CANCELLED,
            QueueStatus.NO_SHOW,
        )


class QueueAction(str, Enum):
    """Named operations a staff member can perform on a queue entry."""

    CHECK_IN = "check_in"
    CALL = "call"
    START = "start"
    SEND_TO_EXAM = "send_to_exam"
    RETURN_FROM_EXAM = "return_from_exam"
    COMPLETE = "complete"
    CLOSE = "close"
    MARK_NO_SHOW = "mark_no_show"
    CANCEL = "cancel"
    REQUEUE = "requeue"

    @property
    def target_status(self) -> QueueStatus:
        """Status an entry ends up in after this action succeeds."""
        return ACTION_TARGETS[self]


ACTION_TARGETS = {
    QueueAction.CHECK_IN: QueueStatus.WAITING,
    QueueAction.CALL: QueueStatus.CALLED,
    QueueAction.START: QueueStatus.IN_CONSULTATION,
    QueueAction.SEND_TO_EXAM: QueueStatus.AWAITING_EXAM,
    QueueAction.RETURN_FROM_EXAM: QueueStatus.IN_CONSULTATION,
    QueueAction.COMPLETE: QueueStatus.COMPLETED,
    QueueAction.CLOSE: QueueStatus.CLOSED,
    QueueAction.MARK_NO_SHOW: QueueStatus.NO_SHOW,
    QueueAction.CANCEL: QueueStatus.CANCELLED,
    QueueAction.REQUEUE: QueueStatus.WAITING,
}

# Actions sharing a target status are told apart by the status they start from
ACTION_SOURCES = {
    QueueAction.START: QueueStatus.CALLED,
    QueueAction.RETURN_FROM_EXAM: QueueStatus.AWAITING_EXAM,
}


class QueuePriority(int, Enum):
    """Queue priority, 1 is the most urgent."""

    CRITICAL = 1
    HIGH = 2
    NORMAL = 3
    DEFERRED = 4


class WaitUrgency(str, Enum):
    """Presentation bucket for elapsed waiting time."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
