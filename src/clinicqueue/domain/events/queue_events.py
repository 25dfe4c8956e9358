"""
Events emitted by the queue journey after a transition has been persisted.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..entities.queue_entry import QueueEntry
from ..enums.workflow import QueueAction, QueueStatus


@dataclass(frozen=True)
class QueueTransitioned:
    """A queue entry moved from one status to another."""

    action: QueueAction
    entry: QueueEntry
    previous_status: QueueStatus
    actor_id: Optional[str]
    occurred_at: datetime
    notes: Optional[str] = None

    @property
    def new_status(self) -> QueueStatus:
        return self.entry.status

    @property
    def activity_action(self) -> str:
        """Activity log action name, e.g. ``queue_called`` or ``queue_requeued``."""
        if self.action is QueueAction.REQUEUE:
            return "queue_requeued"
        return f"queue_{self.new_status.value}"

    def activity_metadata(self) -> Dict[str, Any]:
        return {
            "queue_entry_id": self.entry.entry_id,
            "patient_id": self.entry.patient_id,
            "previous_status": self.previous_status.value,
            "new_status": self.new_status.value,
        }
