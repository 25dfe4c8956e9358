"""
MongoDB implementation of QueueEntryRepository.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from clinicqueue.application.ports.repositories.queue_entry_repo import QueueEntryRepository
from clinicqueue.core.exceptions import PersistenceError
from clinicqueue.core.utils.datetime_utils import ensure_utc
from clinicqueue.domain.entities.queue_entry import QueueEntry
from clinicqueue.domain.enums.workflow import QueueStatus

from ..models.queue_m import QueueEntryMongo


logger = logging.getLogger("clinicqueue")


class MongoQueueEntryRepository(QueueEntryRepository):
    """MongoDB implementation of QueueEntryRepository."""

    async def get_entry(self, entry_id: str) -> Optional[QueueEntry]:
        """Find a queue entry by ID."""
        try:
            entry_mongo = await QueueEntryMongo.find_one(QueueEntryMongo.entry_id == entry_id)
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to load queue entry {entry_id}", {"entry_id": entry_id, "error": str(e)}
            ) from e

        if not entry_mongo:
            return None

        return self._mongo_to_domain(entry_mongo)

    async def add(self, entry: QueueEntry) -> QueueEntry:
        """Insert a new queue entry."""
        entry_mongo = self._domain_to_mongo(entry)
        try:
            await entry_mongo.insert()
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to insert queue entry {entry.entry_id}",
                {"entry_id": entry.entry_id, "error": str(e)},
            ) from e
        logger.info(f"Queue entry {entry.entry_id} added for patient {entry.patient_id}")
        return self._mongo_to_domain(entry_mongo)

    async def compare_and_set_status(
        self,
        entry_id: str,
        expected_status: QueueStatus,
        patch: Dict[str, Any],
        expected_fields: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Conditional single-document update keyed on id and expected status."""
        condition: Dict[str, Any] = {
            "entry_id": entry_id,
            "status": QueueStatus(expected_status).value,
        }
        condition.update(expected_fields or {})
        update = {
            key: value.value if isinstance(value, QueueStatus) else value
            for key, value in patch.items()
        }

        try:
            result = await QueueEntryMongo.find_one(condition).update({"$set": update})
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to update queue entry {entry_id}", {"entry_id": entry_id, "error": str(e)}
            ) from e

        # matched_count, not modified_count: the condition holding is what counts
        return result is not None and result.matched_count == 1

    async def find_by_structure(
        self,
        structure_id: str,
        statuses: Optional[List[QueueStatus]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[QueueEntry]:
        """List entries of a clinic ordered by priority then arrival time."""
        query: Dict[str, Any] = {"structure_id": structure_id}
        if statuses:
            query["status"] = {"$in": [QueueStatus(s).value for s in statuses]}
        try:
            entries_mongo = (
                await QueueEntryMongo.find(query)
                .sort([("priority", 1), ("arrival_time", 1)])
                .skip(offset)
                .limit(limit)
                .to_list()
            )
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to list queue for structure {structure_id}",
                {"structure_id": structure_id, "error": str(e)},
            ) from e

        return [self._mongo_to_domain(entry_mongo) for entry_mongo in entries_mongo]

    @staticmethod
    def _domain_to_mongo(entry: QueueEntry) -> QueueEntryMongo:
        """Convert domain entity to MongoDB model."""
        return QueueEntryMongo(
            entry_id=entry.entry_id,
            patient_id=entry.patient_id,
            structure_id=entry.structure_id,
            status=entry.status.value,
            arrival_time=entry.arrival_time,
            checked_in_at=entry.checked_in_at,
            called_at=entry.called_at,
            started_at=entry.started_at,
            completed_at=entry.completed_at,
            assigned_to=entry.assigned_to,
            priority=entry.priority,
            consultation_reason=entry.consultation_reason,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )

    @staticmethod
    def _mongo_to_domain(entry_mongo: QueueEntryMongo) -> QueueEntry:
        """Convert MongoDB model to domain entity (MongoDB returns naive UTC datetimes)."""

        def _utc(value):
            return ensure_utc(value) if value is not None else None

        return QueueEntry(
            entry_id=entry_mongo.entry_id,
            patient_id=entry_mongo.patient_id,
            structure_id=entry_mongo.structure_id,
            status=QueueStatus(entry_mongo.status),
            arrival_time=_utc(entry_mongo.arrival_time),
            checked_in_at=_utc(entry_mongo.checked_in_at),
            called_at=_utc(entry_mongo.called_at),
            started_at=_utc(entry_mongo.started_at),
            completed_at=_utc(entry_mongo.completed_at),
            assigned_to=entry_mongo.assigned_to,
            priority=entry_mongo.priority,
            consultation_reason=entry_mongo.consultation_reason,
            created_at=_utc(entry_mongo.created_at),
            updated_at=_utc(entry_mongo.updated_at),
        )
