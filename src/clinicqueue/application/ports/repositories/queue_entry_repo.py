"""
Queue entry repository interface (current-state snapshot per visit).
"""

from typing import Any, Dict, List, Optional

from clinicqueue.domain.entities.queue_entry import QueueEntry
from clinicqueue.domain.enums.workflow import QueueStatus


class QueueEntryRepository:
    """Repository interface for queue entries.

    Implementations hold no business logic. Driver failures must surface as
    ``PersistenceError``.
    """

    async def get_entry(self, entry_id: str) -> Optional[QueueEntry]:
        """Find a queue entry by ID."""
        raise NotImplementedError

    async def add(self, entry: QueueEntry) -> QueueEntry:
        """Insert a newly created entry (patient check-in, outside the journey core)."""
        raise NotImplementedError

    async def compare_and_set_status(
        self,
        entry_id: str,
        expected_status: QueueStatus,
        patch: Dict[str, Any],
        expected_fields: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Atomically apply ``patch`` if the stored status still equals ``expected_status``.

        Expressed as a single conditional write
        (``update ... where id = entry_id and status = expected_status``), never as a
        read followed by an unconditional write.

        Args:
            entry_id: Queue entry ID
            expected_status: Status the caller read before deciding to transition
            patch: Field values to set (must include ``status``)
            expected_fields: Extra stored field values the write is conditioned on

        Returns:
            True if exactly one entry was updated, False if the condition failed
        """
        raise NotImplementedError

    async def find_by_structure(
        self,
        structure_id: str,
        statuses: Optional[List[QueueStatus]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[QueueEntry]:
        """List entries of a clinic ordered by priority then arrival time."""
        raise NotImplementedError
