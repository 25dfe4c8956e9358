"""MongoDB Beanie models for notifications and activity logs."""

from datetime import datetime
from typing import Any, Dict, Optional

from beanie import Document
from pydantic import Field

from clinicqueue.core.utils.datetime_utils import get_current_timestamp


class NotificationMongo(Document):
    """In-app notification addressed to one staff member."""

    user_id: str = Field(..., description="Recipient staff member")
    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification body")
    category: str = Field(default="queue", description="Notification category")
    link_path: Optional[str] = Field(None, description="In-app link")
    read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "notifications"
        indexes = [
            [("user_id", 1), ("created_at", -1)],
        ]


class NotificationEventMongo(Document):
    """Clinic-wide event waiting to be fanned out by the delivery worker."""

    event_key: str = Field(..., description="Event key, e.g. no_show")
    structure_id: Optional[str] = Field(None, description="Clinic the event belongs to")
    subject: str = Field(...)
    message: str = Field(...)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    delivery_status: str = Field(default="pending", description="pending, sent, failed")
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "notification_events"
        indexes = [
            "event_key",
            [("delivery_status", 1), ("created_at", 1)],
        ]


class ActivityLogMongo(Document):
    """Analytics trail of staff actions."""

    structure_id: str = Field(..., description="Clinic ID")
    actor_user_id: str = Field(..., description="Acting staff member")
    patient_id: Optional[str] = Field(None, description="Patient concerned, if any")
    action: str = Field(..., description="Action name, e.g. queue_called")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "activity_logs"
        indexes = [
            [("structure_id", 1), ("created_at", -1)],
        ]
