"""
MongoDB implementation of JourneyStepRepository (append-only).
"""

from typing import List

from pymongo.errors import PyMongoError

from clinicqueue.application.ports.repositories.journey_step_repo import JourneyStepRepository
from clinicqueue.core.exceptions import PersistenceError
from clinicqueue.core.utils.datetime_utils import ensure_utc
from clinicqueue.domain.entities.journey_step import JourneyStep
from clinicqueue.domain.enums.workflow import QueueStatus

from ..models.queue_m import JourneyStepMongo


class MongoJourneyStepRepository(JourneyStepRepository):
    """MongoDB implementation of JourneyStepRepository.

    Only inserts are issued; ObjectId order breaks ``step_at`` ties so that
    steps read back in insertion order.
    """

    async def append_step(self, step: JourneyStep) -> None:
        """Insert one journey step."""
        step_mongo = JourneyStepMongo(
            step_id=step.step_id,
            queue_entry_id=step.queue_entry_id,
            step_type=step.step_type.value,
            step_at=step.step_at,
            performed_by=step.performed_by,
            notes=step.notes,
            created_at=step.created_at,
        )
        try:
            await step_mongo.insert()
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to append journey step for queue entry {step.queue_entry_id}",
                {"queue_entry_id": step.queue_entry_id, "error": str(e)},
            ) from e

    async def list_steps(self, queue_entry_id: str) -> List[JourneyStep]:
        """Steps of an entry ordered by step_at then insertion order."""
        try:
            steps_mongo = (
                await JourneyStepMongo.find(JourneyStepMongo.queue_entry_id == queue_entry_id)
                .sort([("step_at", 1), ("_id", 1)])
                .to_list()
            )
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to load journey of queue entry {queue_entry_id}",
                {"queue_entry_id": queue_entry_id, "error": str(e)},
            ) from e

        return [
            JourneyStep(
                step_id=step_mongo.step_id,
                queue_entry_id=step_mongo.queue_entry_id,
                step_type=QueueStatus(step_mongo.step_type),
                step_at=ensure_utc(step_mongo.step_at),
                performed_by=step_mongo.performed_by,
                notes=step_mongo.notes,
                created_at=ensure_utc(step_mongo.created_at),
            )
            for step_mongo in steps_mongo
        ]
