"""Journey step domain entity: one audit record of a successful transition."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..enums.workflow import QueueStatus


@dataclass(frozen=True)
class JourneyStep:
    """Append-only audit record. Never mutated or deleted once written."""

    queue_entry_id: str
    step_type: QueueStatus
    step_at: datetime
    performed_by: Optional[str] = None
    notes: Optional[str] = None
    step_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        object.__setattr__(self, "step_type", QueueStatus(self.step_type))
