"""Transition Queue Entry use case: moves a visit through the clinic journey.

Every operation follows the same sequence: guard check, conditional (CAS)
status write, journey step append, fire-and-forget side effects. Guard and CAS
failures come back as a ``TransitionResult`` carrying the typed error;
``PersistenceError`` from the store is raised.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from clinicqueue.application.ports.repositories.journey_step_repo import JourneyStepRepository
from clinicqueue.application.ports.repositories.queue_entry_repo import QueueEntryRepository
from clinicqueue.application.ports.services.activity_logger import ActivityLogger
from clinicqueue.application.ports.services.identity_service import IdentityService
from clinicqueue.application.ports.services.notification_service import NotificationService
from clinicqueue.core.config import QueueSettings
from clinicqueue.core.exceptions import AuditWriteError, PersistenceError
from clinicqueue.core.structured_logger import SIDE_EFFECTS_LOGGER
from clinicqueue.core.utils.datetime_utils import format_timestamp, get_current_timestamp
from clinicqueue.domain.entities.journey_step import JourneyStep
from clinicqueue.domain.entities.queue_entry import QueueEntry
from clinicqueue.domain.enums.workflow import (
    ACTION_SOURCES,
    QueueAction,
    QueuePriority,
    QueueStatus,
)
from clinicqueue.domain.errors import (
    ConcurrencyConflictError,
    InvalidTransitionError,
    TransitionError,
)
from clinicqueue.domain.events.queue_events import QueueTransitioned
from clinicqueue.domain.transitions import can_transition
from clinicqueue.observability import (
    add_span_attribute,
    record_side_effect_failure,
    record_transition,
    set_span_status,
    trace_operation,
)
from clinicqueue.observability.audit import report_audit_gap


logger = logging.getLogger("clinicqueue")
side_effects_logger = logging.getLogger(SIDE_EFFECTS_LOGGER)

Clock = Callable[[], datetime]

PRIORITY_LABELS = {
    QueuePriority.CRITICAL: "critical",
    QueuePriority.HIGH: "high",
    QueuePriority.NORMAL: "normal",
    QueuePriority.DEFERRED: "deferred",
}


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a queue operation: the updated entry or a typed error."""

    entry: Optional[QueueEntry] = None
    error: Optional[TransitionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> QueueEntry:
        """Return the updated entry, raising the transition error on failure."""
        if self.error is not None:
            raise self.error
        return self.entry

    @classmethod
    def success(cls, entry: QueueEntry) -> "TransitionResult":
        return cls(entry=entry)

    @classmethod
    def failure(cls, error: TransitionError) -> "TransitionResult":
        return cls(error=error)


def is_action_allowed(action: QueueAction, entry: QueueEntry) -> bool:
    """Check whether ``action`` may be applied to ``entry`` in its current state."""
    if action is QueueAction.REQUEUE:
        return entry.status is QueueStatus.NO_SHOW
    if action is QueueAction.CHECK_IN:
        return entry.status is QueueStatus.WAITING and entry.checked_in_at is None
    source = ACTION_SOURCES.get(action)
    if source is not None and entry.status is not source:
        return False
    return can_transition(entry.status, action.target_status)


def available_actions(entry: QueueEntry) -> List[QueueAction]:
    """Actions the UI may offer for ``entry``, in declaration order."""
    return [action for action in QueueAction if is_action_allowed(action, entry)]


class TransitionOrchestrator:
    """Single writer of queue entries and journey steps."""

    def __init__(
        self,
        queue_repository: QueueEntryRepository,
        journey_repository: JourneyStepRepository,
        notification_service: Optional[NotificationService] = None,
        activity_logger: Optional[ActivityLogger] = None,
        identity_service: Optional[IdentityService] = None,
        settings: Optional[QueueSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self._queue_repository = queue_repository
        self._journey_repository = journey_repository
        self._notification_service = notification_service
        self._activity_logger = activity_logger
        self._identity_service = identity_service
        self._settings = settings or QueueSettings()
        self._clock = clock or get_current_timestamp
        self._background_tasks: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Named operations
    # ------------------------------------------------------------------

    async def check_in(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        """Record the first journey step of a freshly created waiting entry."""
        return await self._transition(
            QueueAction.CHECK_IN,
            entry,
            actor_id,
            notes or self._settings.check_in_note,
            expected_fields={"checked_in_at": None},
        )

    async def call(
        self,
        entry: QueueEntry,
        actor_id: Optional[str],
        notes: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> TransitionResult:
        """Call a waiting patient; the assignee is supplied, inherited, or the caller."""
        assignee = assigned_to or entry.assigned_to or actor_id
        return await self._transition(
            QueueAction.CALL, entry, actor_id, notes, extra_patch={"assigned_to": assignee}
        )

    async def start(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        return await self._transition(QueueAction.START, entry, actor_id, notes)

    async def send_to_exam(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        return await self._transition(
            QueueAction.SEND_TO_EXAM, entry, actor_id, notes or self._settings.exam_default_note
        )

    async def return_from_exam(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        return await self._transition(QueueAction.RETURN_FROM_EXAM, entry, actor_id, notes)

    async def complete(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        return await self._transition(QueueAction.COMPLETE, entry, actor_id, notes)

    async def close(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        """Administrative closure of a completed visit."""
        return await self._transition(QueueAction.CLOSE, entry, actor_id, notes)

    async def mark_no_show(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        return await self._transition(QueueAction.MARK_NO_SHOW, entry, actor_id, notes)

    async def cancel(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        return await self._transition(QueueAction.CANCEL, entry, actor_id, notes)

    async def requeue(
        self, entry: QueueEntry, actor_id: Optional[str], notes: Optional[str] = None
    ) -> TransitionResult:
        """Put a no-show patient back in the waiting room and restart the visit clock."""
        return await self._transition(
            QueueAction.REQUEUE, entry, actor_id, notes or self._settings.requeue_note
        )

    async def perform(
        self,
        action: QueueAction,
        entry: QueueEntry,
        actor_id: Optional[str],
        notes: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> TransitionResult:
        """Dispatch a named action (used by the HTTP layer)."""
        if action is QueueAction.CALL:
            return await self.call(entry, actor_id, notes, assigned_to=assigned_to)
        operation = getattr(self, action.value)
        return await operation(entry, actor_id, notes)

    async def drain(self) -> None:
        """Wait for pending side effects (shutdown and tests)."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    @property
    def pending_side_effects(self) -> int:
        return len(self._background_tasks)

    # ------------------------------------------------------------------
    # Transition pipeline
    # ------------------------------------------------------------------

    async def _transition(
        self,
        action: QueueAction,
        entry: QueueEntry,
        actor_id: Optional[str],
        notes: Optional[str],
        extra_patch: Optional[Dict[str, Any]] = None,
        expected_fields: Optional[Dict[str, Any]] = None,
    ) -> TransitionResult:
        target = action.target_status
        attributes = {
            "queue.action": action.value,
            "queue.entry_id": entry.entry_id,
            "queue.current_status": entry.status.value,
            "queue.target_status": target.value,
        }
        with trace_operation("queue.transition", attributes) as span:
            if not is_action_allowed(action, entry):
                logger.info(
                    f"Rejected {action.value} on queue entry {entry.entry_id}: "
                    f"{entry.status.value} -> {target.value} is not allowed"
                )
                record_transition(action.value, "invalid_transition")
                set_span_status(span, False, "invalid transition")
                return TransitionResult.failure(InvalidTransitionError(entry.status, target))

            now = self._clock()
            patch = self._build_patch(action, now)
            patch.update(extra_patch or {})

            try:
                written = await self._queue_repository.compare_and_set_status(
                    entry.entry_id, entry.status, patch, expected_fields
                )
            except PersistenceError as e:
                logger.error(f"Failed to persist {action.value} on queue entry {entry.entry_id}: {e}")
                record_transition(action.value, "persistence_error")
                set_span_status(span, False, "persistence error")
                raise

            if not written:
                logger.info(
                    f"Concurrent update on queue entry {entry.entry_id}: "
                    f"expected status {entry.status.value} no longer stored"
                )
                record_transition(action.value, "conflict")
                set_span_status(span, False, "concurrency conflict")
                return TransitionResult.failure(
                    ConcurrencyConflictError(entry.entry_id, entry.status)
                )

            updated = entry.with_patch(patch)
            await self._append_step(
                JourneyStep(
                    queue_entry_id=entry.entry_id,
                    step_type=target,
                    step_at=now,
                    performed_by=actor_id,
                    notes=notes,
                ),
                actor_id,
            )

            logger.info(
                f"Queue entry {entry.entry_id}: {entry.status.value} -> {target.value} "
                f"({action.value}) by {actor_id or 'unknown'}"
            )
            record_transition(action.value, "ok")
            add_span_attribute(span, "queue.actor_id", actor_id)
            set_span_status(span, True)

            self._dispatch_side_effects(
                QueueTransitioned(
                    action=action,
                    entry=updated,
                    previous_status=entry.status,
                    actor_id=actor_id,
                    occurred_at=now,
                    notes=notes,
                )
            )
            return TransitionResult.success(updated)

    @staticmethod
    def _build_patch(action: QueueAction, now: datetime) -> Dict[str, Any]:
        patch: Dict[str, Any] = {"status": action.target_status, "updated_at": now}
        if action is QueueAction.CHECK_IN:
            patch["checked_in_at"] = now
        elif action is QueueAction.CALL:
            patch["called_at"] = now
        elif action is QueueAction.START:
            patch["started_at"] = now
        elif action in (QueueAction.COMPLETE, QueueAction.CANCEL, QueueAction.MARK_NO_SHOW):
            patch["completed_at"] = now
        elif action is QueueAction.REQUEUE:
            patch.update(
                arrival_time=now,
                called_at=None,
                started_at=None,
                completed_at=None,
            )
        # return_from_exam keeps the original started_at; send_to_exam and close
        # only change the status.
        return patch

    async def _append_step(self, step: JourneyStep, actor_id: Optional[str]) -> None:
        """Append to the journey log; a failure is an audit gap, never a rollback."""
        try:
            await self._journey_repository.append_step(step)
        except Exception as e:
            report_audit_gap(
                AuditWriteError(step.queue_entry_id, step.step_type.value, e), actor_id
            )

    # ------------------------------------------------------------------
    # Best-effort side effects
    # ------------------------------------------------------------------

    def _dispatch_side_effects(self, event: QueueTransitioned) -> None:
        task = asyncio.create_task(self._run_side_effects(event))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _run_side_effects(self, event: QueueTransitioned) -> None:
        jobs: List[Awaitable[None]] = []
        if self._activity_logger is not None and event.entry.structure_id and event.actor_id:
            jobs.append(
                self._best_effort(
                    "activity_log",
                    event,
                    self._activity_logger.log(
                        event.entry.structure_id,
                        event.actor_id,
                        event.activity_action,
                        event.activity_metadata(),
                    ),
                )
            )
        if self._notification_service is not None:
            jobs.append(self._best_effort("notification", event, self._notify(event)))
        if jobs:
            await asyncio.gather(*jobs)

    async def _best_effort(self, kind: str, event: QueueTransitioned, job: Awaitable[None]) -> None:
        try:
            await asyncio.wait_for(job, timeout=self._settings.side_effect_timeout_seconds)
        except Exception as e:
            side_effects_logger.warning(
                f"Dropped {kind} for {event.action.value} on queue entry "
                f"{event.entry.entry_id}: {type(e).__name__}: {e}"
            )
            record_side_effect_failure(kind)

    async def _notify(self, event: QueueTransitioned) -> None:
        if event.action is QueueAction.CALL:
            await self._notify_assignee(
                event, "Patient called", "{patient} is waiting for you"
            )
        elif event.action is QueueAction.START:
            await self._notify_assignee(
                event, "Consultation started", "{patient} is in consultation"
            )
        elif event.action is QueueAction.MARK_NO_SHOW:
            await self._notify_no_show(event)

    async def _notify_assignee(self, event: QueueTransitioned, title: str, body: str) -> None:
        entry = event.entry
        if not entry.assigned_to or entry.assigned_to == event.actor_id:
            return
        patient_name = await self._patient_name(entry.patient_id)
        message = body.format(patient=patient_name)
        if entry.priority <= QueuePriority.HIGH:
            message += f" (priority: {PRIORITY_LABELS[QueuePriority(entry.priority)]})"
        await self._notification_service.notify(
            entry.assigned_to,
            title,
            message,
            self._settings.notification_category,
            self._settings.notification_link_path,
        )

    async def _notify_no_show(self, event: QueueTransitioned) -> None:
        entry = event.entry
        patient_name = await self._patient_name(entry.patient_id)
        practitioner_name = self._settings.staff_placeholder
        if entry.assigned_to:
            practitioner_name = await self._lookup_name(
                "staff", entry.assigned_to, self._settings.staff_placeholder
            )
        date_time = format_timestamp(event.occurred_at, self._settings.no_show_datetime_format)
        await self._notification_service.notify_event(
            "no_show",
            entry.structure_id,
            f"Patient no-show: {patient_name}",
            f"{patient_name} did not show up for the visit with {practitioner_name} "
            f"on {date_time}.",
            {
                "patient": patient_name,
                "practitioner": practitioner_name,
                "date": date_time,
                "queue_entry_id": entry.entry_id,
            },
        )

    async def _patient_name(self, patient_id: str) -> str:
        return await self._lookup_name("patient", patient_id, self._settings.patient_placeholder)

    async def _lookup_name(self, kind: str, identifier: str, placeholder: str) -> str:
        """Resolve a display name, degrading to ``placeholder`` on any failure."""
        if self._identity_service is None:
            return placeholder
        try:
            if kind == "patient":
                name = await self._identity_service.get_patient_display_name(identifier)
            else:
                name = await self._identity_service.get_staff_display_name(identifier)
        except Exception as e:
            side_effects_logger.warning(f"{kind} name lookup failed for {identifier}: {e}")
            return placeholder
        return (name or "").strip() or placeholder
