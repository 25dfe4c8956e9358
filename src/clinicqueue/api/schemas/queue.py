"""
Queue journey request/response schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...application.use_cases.get_clinic_queue import ClinicQueueView
from ...application.use_cases.get_queue_journey import QueueJourneyView
from ...domain.entities.journey_step import JourneyStep
from ...domain.entities.queue_entry import QueueEntry
from ...domain.enums.workflow import QueueAction, QueueStatus, WaitUrgency


class TransitionRequestSchema(BaseModel):
    """Body of a queue action."""

    actor_id: Optional[str] = Field(None, description="Staff member performing the action")
    notes: Optional[str] = Field(None, max_length=2000, description="Free text notes for the journey step")
    assigned_to: Optional[str] = Field(None, description="Assignee for the call action")
    expected_status: Optional[QueueStatus] = Field(
        None, description="Status the client last saw; a mismatch is a conflict"
    )


class QueueEntrySchema(BaseModel):
    entry_id: str
    patient_id: str
    structure_id: Optional[str] = None
    status: QueueStatus
    arrival_time: datetime
    checked_in_at: Optional[datetime] = None
    called_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assigned_to: Optional[str] = None
    priority: int
    consultation_reason: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: QueueEntry) -> "QueueEntrySchema":
        return cls(
            entry_id=entry.entry_id,
            patient_id=entry.patient_id,
            structure_id=entry.structure_id,
            status=entry.status,
            arrival_time=entry.arrival_time,
            checked_in_at=entry.checked_in_at,
            called_at=entry.called_at,
            started_at=entry.started_at,
            completed_at=entry.completed_at,
            assigned_to=entry.assigned_to,
            priority=entry.priority,
            consultation_reason=entry.consultation_reason,
        )


class WaitingTimeSchema(BaseModel):
    minutes: int
    formatted: str
    urgency: WaitUrgency


class JourneyStepSchema(BaseModel):
    id: str
    step_type: QueueStatus
    step_at: datetime
    performed_by: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_step(cls, step: JourneyStep) -> "JourneyStepSchema":
        return cls(
            id=step.step_id,
            step_type=step.step_type,
            step_at=step.step_at,
            performed_by=step.performed_by,
            notes=step.notes,
        )


class QueueEntryDetailSchema(BaseModel):
    entry: QueueEntrySchema
    waiting_time: WaitingTimeSchema
    available_actions: List[QueueAction]

    @classmethod
    def from_view(cls, view: QueueJourneyView) -> "QueueEntryDetailSchema":
        return cls(
            entry=QueueEntrySchema.from_entry(view.entry),
            waiting_time=WaitingTimeSchema(
                minutes=view.waiting_time.minutes,
                formatted=view.waiting_time.formatted,
                urgency=view.urgency,
            ),
            available_actions=view.available_actions,
        )


class JourneySchema(BaseModel):
    entry_id: str
    status: QueueStatus
    consistent: bool = Field(..., description="Timeline is legal and ends in the stored status")
    steps: List[JourneyStepSchema]


class TransitionResponseSchema(BaseModel):
    action: QueueAction
    entry: QueueEntrySchema
    available_actions: List[QueueAction]


class QueueStatsSchema(BaseModel):
    waiting: int
    in_progress: int
    completed_today: int
    average_wait_minutes: int


class ClinicQueueSchema(BaseModel):
    structure_id: str
    entries: List[QueueEntryDetailSchema]
    stats: QueueStatsSchema

    @classmethod
    def from_view(cls, view: ClinicQueueView) -> "ClinicQueueSchema":
        return cls(
            structure_id=view.structure_id,
            entries=[QueueEntryDetailSchema.from_view(item) for item in view.items],
            stats=QueueStatsSchema(
                waiting=view.stats.waiting,
                in_progress=view.stats.in_progress,
                completed_today=view.stats.completed_today,
                average_wait_minutes=view.stats.average_wait_minutes,
            ),
        )
