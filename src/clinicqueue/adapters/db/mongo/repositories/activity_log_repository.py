"""
MongoDB implementation of the ActivityLogger port.
"""

from typing import Any, Dict, Optional

from clinicqueue.application.ports.services.activity_logger import ActivityLogger

from ..models.notification_m import ActivityLogMongo


class MongoActivityLogger(ActivityLogger):
    """Writes staff actions to the ``activity_logs`` collection."""

    async def log(
        self,
        structure_id: str,
        actor_id: str,
        action: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        metadata = dict(metadata or {})
        await ActivityLogMongo(
            structure_id=structure_id,
            actor_user_id=actor_id,
            patient_id=metadata.get("patient_id"),
            action=action,
            metadata=metadata,
        ).insert()
