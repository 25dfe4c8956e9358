"""Get Queue Journey use case: current state plus ordered timeline of a visit."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from clinicqueue.application.ports.repositories.journey_step_repo import JourneyStepRepository
from clinicqueue.application.ports.repositories.queue_entry_repo import QueueEntryRepository
from clinicqueue.application.use_cases.transition_queue_entry import available_actions
from clinicqueue.application.utils.waiting_time import WaitingTime, get_waiting_time, wait_urgency
from clinicqueue.core.config import QueueSettings
from clinicqueue.domain.entities.journey_step import JourneyStep
from clinicqueue.domain.entities.queue_entry import QueueEntry
from clinicqueue.domain.enums.workflow import QueueAction, WaitUrgency
from clinicqueue.domain.errors import QueueEntryNotFoundError
from clinicqueue.domain.transitions import is_legal_path


@dataclass
class QueueJourneyView:
    """Read model for one queue entry."""

    entry: QueueEntry
    waiting_time: WaitingTime
    urgency: WaitUrgency
    available_actions: List[QueueAction]
    steps: List[JourneyStep] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        """True when the timeline is legal and its last step matches the stored status.

        An entry without steps (created but not yet checked in) is consistent.
        """
        if not self.steps:
            return True
        return (
            is_legal_path(step.step_type for step in self.steps)
            and self.steps[-1].step_type is self.entry.status
        )


class GetQueueJourneyUseCase:
    """Assemble the queue entry, its waiting time and its journey timeline."""

    def __init__(
        self,
        queue_repository: QueueEntryRepository,
        journey_repository: JourneyStepRepository,
        settings: Optional[QueueSettings] = None,
    ):
        self._queue_repository = queue_repository
        self._journey_repository = journey_repository
        self._settings = settings or QueueSettings()

    async def get_entry(self, entry_id: str) -> QueueEntry:
        entry = await self._queue_repository.get_entry(entry_id)
        if entry is None:
            raise QueueEntryNotFoundError(entry_id)
        return entry

    async def execute(
        self, entry_id: str, now: Optional[datetime] = None, include_steps: bool = True
    ) -> QueueJourneyView:
        entry = await self.get_entry(entry_id)
        steps = await self._journey_repository.list_steps(entry_id) if include_steps else []
        waiting = get_waiting_time(entry.arrival_time, now=now)
        return QueueJourneyView(
            entry=entry,
            waiting_time=waiting,
            urgency=wait_urgency(
                waiting.minutes,
                medium_after=self._settings.wait_medium_after_minutes,
                high_after=self._settings.wait_high_after_minutes,
            ),
            available_actions=available_actions(entry),
            steps=steps,
        )
