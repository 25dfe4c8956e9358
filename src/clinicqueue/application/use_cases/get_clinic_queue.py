"""Get Clinic Queue use case: the live queue of a structure with its dashboard counters."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from clinicqueue.application.ports.repositories.queue_entry_repo import QueueEntryRepository
from clinicqueue.application.use_cases.get_queue_journey import QueueJourneyView
from clinicqueue.application.use_cases.transition_queue_entry import available_actions
from clinicqueue.application.utils.waiting_time import get_waiting_time, wait_urgency
from clinicqueue.core.config import QueueSettings
from clinicqueue.core.utils.datetime_utils import ensure_utc, get_current_timestamp
from clinicqueue.domain.enums.workflow import QueueStatus


@dataclass(frozen=True)
class QueueStats:
    waiting: int = 0
    in_progress: int = 0
    completed_today: int = 0
    average_wait_minutes: int = 0


@dataclass
class ClinicQueueView:
    structure_id: str
    items: List[QueueJourneyView] = field(default_factory=list)
    stats: QueueStats = field(default_factory=QueueStats)


def compute_queue_stats(items: Sequence[QueueJourneyView], now: datetime) -> QueueStats:
    """Counters over the fetched entries.

    ``completed_today`` compares UTC calendar days. ``average_wait_minutes`` is the
    mean wait of waiting entries rounded half up, 0 when nobody waits.
    """
    today = ensure_utc(now).date()
    waiting = [v for v in items if v.entry.status is QueueStatus.WAITING]
    in_progress = sum(1 for v in items if v.entry.status is QueueStatus.IN_CONSULTATION)
    completed_today = sum(
        1
        for v in items
        if v.entry.status is QueueStatus.COMPLETED
        and v.entry.completed_at is not None
        and ensure_utc(v.entry.completed_at).date() == today
    )
    average = 0
    if waiting:
        mean = sum(v.waiting_time.minutes for v in waiting) / len(waiting)
        average = math.floor(mean + 0.5)
    return QueueStats(
        waiting=len(waiting),
        in_progress=in_progress,
        completed_today=completed_today,
        average_wait_minutes=average,
    )


class GetClinicQueueUseCase:
    """List a structure's entries by priority then arrival, with waiting times."""

    def __init__(self, queue_repository: QueueEntryRepository, settings: Optional[QueueSettings] = None):
        self._queue_repository = queue_repository
        self._settings = settings or QueueSettings()

    async def execute(
        self,
        structure_id: str,
        statuses: Optional[List[QueueStatus]] = None,
        limit: int = 100,
        offset: int = 0,
        now: Optional[datetime] = None,
    ) -> ClinicQueueView:
        reference = ensure_utc(now) if now is not None else get_current_timestamp()
        entries = await self._queue_repository.find_by_structure(
            structure_id, statuses=statuses, limit=limit, offset=offset
        )

        items = []
        for entry in entries:
            waiting = get_waiting_time(entry.arrival_time, now=reference)
            items.append(
                QueueJourneyView(
                    entry=entry,
                    waiting_time=waiting,
                    urgency=wait_urgency(
                        waiting.minutes,
                        medium_after=self._settings.wait_medium_after_minutes,
                        high_after=self._settings.wait_high_after_minutes,
                    ),
                    available_actions=available_actions(entry),
                )
            )

        return ClinicQueueView(
            structure_id=structure_id,
            items=items,
            stats=compute_queue_stats(items, reference),
        )
