"""
Journey step log interface (append-only audit of successful transitions).
"""

from typing import List

from clinicqueue.domain.entities.journey_step import JourneyStep


class JourneyStepRepository:
    """Append-only log of journey steps. Steps are never updated or deleted."""

    async def append_step(self, step: JourneyStep) -> None:
        """Append a step to the log."""
        raise NotImplementedError

    async def list_steps(self, queue_entry_id: str) -> List[JourneyStep]:
        """Return the steps of an entry ordered by ``step_at``, ties by insertion order."""
        raise NotImplementedError
