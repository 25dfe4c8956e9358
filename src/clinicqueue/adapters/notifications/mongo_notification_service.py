"""
In-app notification service backed by MongoDB.

Staff notifications land in ``notifications`` (read by the realtime layer);
clinic-wide events land in ``notification_events`` for the delivery worker.
"""

import logging
from typing import Any, Dict, Optional

from pymongo.errors import PyMongoError

from clinicqueue.application.ports.services.notification_service import NotificationService
from clinicqueue.core.exceptions import NotificationDeliveryError

from ..db.mongo.models.notification_m import NotificationEventMongo, NotificationMongo


logger = logging.getLogger("clinicqueue")


class MongoNotificationService(NotificationService):
    """Persists notifications; delivery to email/SMS is handled elsewhere."""

    async def notify(
        self,
        target_user_id: str,
        title: str,
        body: str,
        category: str,
        link_path: Optional[str] = None,
    ) -> None:
        try:
            await NotificationMongo(
                user_id=target_user_id,
                title=title,
                body=body,
                category=category,
                link_path=link_path,
            ).insert()
        except PyMongoError as e:
            raise NotificationDeliveryError(
                f"Could not store notification for {target_user_id}", {"error": str(e)}
            ) from e
        logger.debug(f"Notification '{title}' queued for {target_user_id}")

    async def notify_event(
        self,
        event_key: str,
        structure_id: Optional[str],
        subject: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        try:
            await NotificationEventMongo(
                event_key=event_key,
                structure_id=structure_id,
                subject=subject,
                message=message,
                metadata=metadata or {},
            ).insert()
        except PyMongoError as e:
            raise NotificationDeliveryError(
                f"Could not publish {event_key} event", {"error": str(e)}
            ) from e
        logger.debug(f"Notification event '{event_key}' published for structure {structure_id}")
