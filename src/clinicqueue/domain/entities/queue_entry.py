"""Queue entry domain entity representing one active clinic visit."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..enums.workflow import QueueStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Fields the transition orchestrator may patch; everything else is immutable
# for the lifetime of the entry (or owned by another path, e.g. priority).
MUTABLE_FIELDS = frozenset(
    {
        "status",
        "arrival_time",
        "checked_in_at",
        "called_at",
        "started_at",
        "completed_at",
        "assigned_to",
        "updated_at",
    }
)


@dataclass(frozen=True)
class QueueEntry:
    """Current-state snapshot of a patient visit in the queue."""

    entry_id: str
    patient_id: str
    structure_id: Optional[str] = None
    status: QueueStatus = QueueStatus.WAITING
    arrival_time: datetime = field(default_factory=_utcnow)
    checked_in_at: Optional[datetime] = None
    called_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assigned_to: Optional[str] = None
    priority: int = 3
    consultation_reason: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.entry_id:
            raise ValueError("Queue entry ID cannot be empty")
        if not self.patient_id:
            raise ValueError("Queue entry must reference a patient")
        if not 1 <= int(self.priority) <= 4:
            raise ValueError("Priority must be between 1 (critical) and 4 (deferred)")
        # Accept raw status strings coming from persistence
        object.__setattr__(self, "status", QueueStatus(self.status))

    def with_patch(self, patch: Dict[str, Any]) -> "QueueEntry":
        """Return a copy with the given mutable fields replaced."""
        unknown = set(patch) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot patch immutable queue entry fields: {sorted(unknown)}")
        return replace(self, **patch)

    def timestamps_in_order(self) -> bool:
        """Check arrival <= called <= started <= completed for the non-null ones."""
        ordered = [
            ts
            for ts in (self.arrival_time, self.called_at, self.started_at, self.completed_at)
            if ts is not None
        ]
        return all(a <= b for a, b in zip(ordered, ordered[1:]))
