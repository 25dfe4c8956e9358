"""
Shared fixtures: in-memory queue store, journey log and recording side-effect fakes.
"""

import asyncio
import os
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from clinicqueue.application.ports.repositories.journey_step_repo import JourneyStepRepository
from clinicqueue.application.ports.repositories.queue_entry_repo import QueueEntryRepository
from clinicqueue.application.ports.services.activity_logger import ActivityLogger
from clinicqueue.application.ports.services.identity_service import IdentityService
from clinicqueue.application.ports.services.notification_service import NotificationService
from clinicqueue.application.use_cases.transition_queue_entry import TransitionOrchestrator
from clinicqueue.core.config import QueueSettings
from clinicqueue.core.exceptions import PersistenceError
from clinicqueue.domain.entities.journey_step import JourneyStep
from clinicqueue.domain.entities.queue_entry import QueueEntry
from clinicqueue.domain.enums.workflow import QueueStatus


T0 = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


class InMemoryQueueEntryRepository(QueueEntryRepository):
    """Queue store whose CAS check and write happen under one lock."""

    def __init__(self):
        self.entries: Dict[str, QueueEntry] = {}
        self.writes = 0
        self._lock = asyncio.Lock()

    async def get_entry(self, entry_id: str) -> Optional[QueueEntry]:
        return self.entries.get(entry_id)

    async def add(self, entry: QueueEntry) -> QueueEntry:
        self.entries[entry.entry_id] = entry
        return entry

    async def compare_and_set_status(
        self,
        entry_id: str,
        expected_status: QueueStatus,
        patch: Dict[str, Any],
        expected_fields: Optional[Dict[str, Any]] = None,
    ) -> bool:
        # Yield first so concurrent callers interleave before the conditional write
        await asyncio.sleep(0)
        async with self._lock:
            stored = self.entries.get(entry_id)
            if stored is None or stored.status is not QueueStatus(expected_status):
                return False
            for name, value in (expected_fields or {}).items():
                if getattr(stored, name) != value:
                    return False
            self.entries[entry_id] = stored.with_patch(patch)
            self.writes += 1
            return True

    async def find_by_structure(self, structure_id, statuses=None, limit=100, offset=0):
        matching = [
            e
            for e in self.entries.values()
            if e.structure_id == structure_id and (not statuses or e.status in statuses)
        ]
        matching.sort(key=lambda e: (e.priority, e.arrival_time))
        return matching[offset : offset + limit]


class BrokenQueueEntryRepository(InMemoryQueueEntryRepository):
    async def compare_and_set_status(self, entry_id, expected_status, patch, expected_fields=None):
        raise PersistenceError("connection refused", {"entry_id": entry_id})


class InMemoryJourneyStepRepository(JourneyStepRepository):
    def __init__(self):
        self.steps: List[JourneyStep] = []

    async def append_step(self, step: JourneyStep) -> None:
        self.steps.append(step)

    async def list_steps(self, queue_entry_id: str) -> List[JourneyStep]:
        indexed = [
            (step.step_at, index, step)
            for index, step in enumerate(self.steps)
            if step.queue_entry_id == queue_entry_id
        ]
        return [step for _, _, step in sorted(indexed, key=lambda item: item[:2])]


class FailingJourneyStepRepository(InMemoryJourneyStepRepository):
    async def append_step(self, step: JourneyStep) -> None:
        raise PersistenceError("journey log unavailable")


class RecordingNotificationService(NotificationService):
    def __init__(self, fail: bool = False):
        self.notifications: List[Dict[str, Any]] = []
        self.events: List[Dict[str, Any]] = []
        self.fail = fail

    async def notify(self, target_user_id, title, body, category, link_path=None):
        if self.fail:
            raise RuntimeError("push gateway down")
        self.notifications.append(
            {
                "target_user_id": target_user_id,
                "title": title,
                "body": body,
                "category": category,
                "link_path": link_path,
            }
        )

    async def notify_event(self, event_key, structure_id, subject, message, metadata=None):
        if self.fail:
            raise RuntimeError("push gateway down")
        self.events.append(
            {
                "event_key": event_key,
                "structure_id": structure_id,
                "subject": subject,
                "message": message,
                "metadata": metadata or {},
            }
        )


class RecordingActivityLogger(ActivityLogger):
    def __init__(self, fail: bool = False):
        self.records: List[Dict[str, Any]] = []
        self.fail = fail

    async def log(self, structure_id, actor_id, action, metadata=None):
        if self.fail:
            raise RuntimeError("activity store down")
        self.records.append(
            {
                "structure_id": structure_id,
                "actor_id": actor_id,
                "action": action,
                "metadata": metadata or {},
            }
        )


class StaticIdentityService(IdentityService):
    def __init__(self, patients=None, staff=None, fail: bool = False):
        self.patients = patients or {}
        self.staff = staff or {}
        self.fail = fail

    async def get_patient_display_name(self, patient_id):
        if self.fail:
            raise RuntimeError("directory down")
        return self.patients.get(patient_id)

    async def get_staff_display_name(self, staff_id):
        if self.fail:
            raise RuntimeError("directory down")
        return self.staff.get(staff_id)


class FakeClock:
    """Deterministic clock; each call advances by ``step``."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        self.now = self.now + self.step
        return self.now


def make_entry(entry_id: str = "q-1", **overrides) -> QueueEntry:
    entry = QueueEntry(
        entry_id=entry_id,
        patient_id="pat-1",
        structure_id="clinic-1",
        status=QueueStatus.WAITING,
        arrival_time=T0,
        created_at=T0,
        updated_at=T0,
    )
    return replace(entry, **overrides) if overrides else entry


@pytest.fixture
def queue_repo():
    return InMemoryQueueEntryRepository()


@pytest.fixture
def journey_repo():
    return InMemoryJourneyStepRepository()


@pytest.fixture
def notifications():
    return RecordingNotificationService()


@pytest.fixture
def activity():
    return RecordingActivityLogger()


@pytest.fixture
def identity():
    return StaticIdentityService(
        patients={"pat-1": "Alice Martin"},
        staff={"doc-1": "Dr. Bernard", "nurse-1": "Nurse Claire"},
    )


@pytest.fixture
def clock():
    return FakeClock()


def make_queue_settings() -> QueueSettings:
    """Queue settings pinned to their documented values, whatever QUEUE_* holds."""
    return QueueSettings(
        requeue_note="requeued after no-show",
        check_in_note="checked in",
        exam_default_note="awaiting complementary exam",
        patient_placeholder="Patient",
        staff_placeholder="Medical team",
        notification_category="queue",
        notification_link_path="/queue",
        no_show_datetime_format="%A %d %B at %H:%M",
        wait_medium_after_minutes=30,
        wait_high_after_minutes=60,
        side_effect_timeout_seconds=1.0,
    )


@pytest.fixture(autouse=True)
def _isolate_queue_environment(monkeypatch):
    for name in [n for n in os.environ if n.upper().startswith("QUEUE_")]:
        monkeypatch.delenv(name)


@pytest.fixture
def queue_settings():
    return make_queue_settings()


@pytest.fixture
def orchestrator(queue_repo, journey_repo, notifications, activity, identity, queue_settings, clock):
    return TransitionOrchestrator(
        queue_repository=queue_repo,
        journey_repository=journey_repo,
        notification_service=notifications,
        activity_logger=activity,
        identity_service=identity,
        settings=queue_settings,
        clock=clock,
    )


@pytest.fixture
def stored_entry(queue_repo):
    entry = make_entry()
    queue_repo.entries[entry.entry_id] = entry
    return entry
