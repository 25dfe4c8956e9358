"""
MongoDB Beanie models for the patient queue and its journey log.
"""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field

from clinicqueue.core.utils.datetime_utils import get_current_timestamp


class QueueEntryMongo(Document):
    """MongoDB model for the current state of a queue entry."""

    entry_id: str = Field(..., description="Queue entry ID")
    patient_id: str = Field(..., description="Patient reference")
    structure_id: Optional[str] = Field(None, description="Clinic the visit belongs to")
    status: str = Field(default="waiting", description="Current queue status")
    arrival_time: datetime = Field(default_factory=get_current_timestamp)
    checked_in_at: Optional[datetime] = None
    called_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assigned_to: Optional[str] = Field(None, description="Assigned staff member")
    priority: int = Field(default=3, ge=1, le=4, description="1 critical .. 4 deferred")
    consultation_reason: Optional[str] = Field(None, description="Consultation reason tag")
    created_at: datetime = Field(default_factory=get_current_timestamp)
    updated_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "patient_queue"
        indexes = [
            "entry_id",
            "patient_id",
            "status",
            [("structure_id", 1), ("priority", 1), ("arrival_time", 1)],
        ]


class JourneyStepMongo(Document):
    """MongoDB model for an append-only journey step."""

    step_id: str = Field(..., description="Journey step ID")
    queue_entry_id: str = Field(..., description="Queue entry the step belongs to")
    step_type: str = Field(..., description="Status reached by the transition")
    step_at: datetime = Field(..., description="When the transition happened")
    performed_by: Optional[str] = Field(None, description="Acting staff member")
    notes: Optional[str] = Field(None, description="Free text notes")
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "patient_journey_steps"
        indexes = [
            "step_id",
            [("queue_entry_id", 1), ("step_at", 1)],
        ]
