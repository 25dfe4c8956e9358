"""
Transition guard for the patient queue journey.

Single source of truth for which status moves are legal. Pure and free of I/O
so the UI layer can call it to pre-disable actions.
"""

from typing import FrozenSet, Iterable, Optional, Union

from .enums.workflow import QueueStatus


def allowed_targets(current: QueueStatus) -> FrozenSet[QueueStatus]:
    """Return the statuses reachable from ``current`` through a generic transition.

    ``no_show -> waiting`` is intentionally absent: it is only reachable through
    the dedicated requeue operation, which also resets the visit clock.
    """
    if current is QueueStatus.WAITING:
        return frozenset({QueueStatus.CALLED, QueueStatus.NO_SHOW, QueueStatus.CANCELLED})
    if current is QueueStatus.CALLED:
        return frozenset(
            {QueueStatus.IN_CONSULTATION, QueueStatus.NO_SHOW, QueueStatus.CANCELLED}
        )
    if current is QueueStatus.IN_CONSULTATION:
        return frozenset(
            {QueueStatus.AWAITING_EXAM, QueueStatus.COMPLETED, QueueStatus.CANCELLED}
        )
    if current is QueueStatus.AWAITING_EXAM:
        # Exam-referred patients go back to consultation before closing.
        return frozenset({QueueStatus.IN_CONSULTATION})
    if current is QueueStatus.COMPLETED:
        return frozenset({QueueStatus.CLOSED})
    if current in (QueueStatus.CLOSED, QueueStatus.CANCELLED, QueueStatus.NO_SHOW):
        return frozenset()
    raise ValueError(f"Unhandled queue status: {current!r}")


def can_transition(
    current: Union[QueueStatus, str], target: Union[QueueStatus, str]
) -> bool:
    """Check whether ``current -> target`` is a legal generic transition.

    Unknown status strings and self-loops are rejected.
    """
    current_status = _coerce(current)
    target_status = _coerce(target)
    if current_status is None or target_status is None:
        return False
    return target_status in allowed_targets(current_status)


def is_legal_path(statuses: Iterable[QueueStatus]) -> bool:
    """Check that consecutive statuses form a legal journey.

    Besides the generic edges, ``no_show -> waiting`` (requeue) is accepted.
    """
    previous: Optional[QueueStatus] = None
    for status in statuses:
        if previous is not None and not (
            can_transition(previous, status)
            or (previous is QueueStatus.NO_SHOW and status is QueueStatus.WAITING)
        ):
            return False
        previous = status
    return True


def _coerce(value: Union[QueueStatus, str]) -> Optional[QueueStatus]:
    if isinstance(value, QueueStatus):
        return value
    try:
        return QueueStatus(value)
    except ValueError:
        return None
