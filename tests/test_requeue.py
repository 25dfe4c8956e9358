"""
Requeue of no-show patients.
"""

from datetime import timedelta

import pytest

from clinicqueue.application.use_cases.get_queue_journey import GetQueueJourneyUseCase
from clinicqueue.domain.enums.workflow import QueueStatus
from clinicqueue.domain.errors import ConcurrencyConflictError, InvalidTransitionError

from conftest import T0, make_entry


@pytest.mark.asyncio
async def test_requeue_resets_visit_clock(orchestrator, queue_repo, journey_repo, activity):
    entry = await queue_repo.add(
        make_entry(
            status=QueueStatus.NO_SHOW,
            called_at=T0 + timedelta(minutes=5),
            completed_at=T0 + timedelta(minutes=20),
            assigned_to="doc-1",
        )
    )

    result = await orchestrator.requeue(entry, "nurse-1")
    await orchestrator.drain()

    requeued = result.unwrap()
    assert requeued.status is QueueStatus.WAITING
    assert requeued.arrival_time == T0 + timedelta(minutes=1)
    assert requeued.called_at is None
    assert requeued.started_at is None
    assert requeued.completed_at is None
    # Assignment survives the requeue
    assert requeued.assigned_to == "doc-1"

    assert len(journey_repo.steps) == 1
    assert journey_repo.steps[0].step_type is QueueStatus.WAITING
    assert journey_repo.steps[0].notes == "requeued after no-show"
    assert activity.records[0]["action"] == "queue_requeued"


@pytest.mark.asyncio
async def test_requeue_custom_note(orchestrator, queue_repo, journey_repo):
    entry = await queue_repo.add(make_entry(status=QueueStatus.NO_SHOW))

    await orchestrator.requeue(entry, "nurse-1", notes="came back from the pharmacy")
    await orchestrator.drain()

    assert journey_repo.steps[0].notes == "came back from the pharmacy"


@pytest.mark.parametrize(
    "status",
    [s for s in QueueStatus if s is not QueueStatus.NO_SHOW],
)
@pytest.mark.asyncio
async def test_requeue_only_from_no_show(orchestrator, queue_repo, journey_repo, status):
    entry = await queue_repo.add(make_entry(status=status))

    result = await orchestrator.requeue(entry, "nurse-1")

    assert isinstance(result.error, InvalidTransitionError)
    assert journey_repo.steps == []
    assert queue_repo.writes == 0


@pytest.mark.asyncio
async def test_requeue_stale_snapshot_is_a_conflict(orchestrator, queue_repo):
    entry = await queue_repo.add(make_entry(status=QueueStatus.NO_SHOW))

    first = await orchestrator.requeue(entry, "nurse-1")
    second = await orchestrator.requeue(entry, "nurse-2")
    await orchestrator.drain()

    assert first.ok
    assert isinstance(second.error, ConcurrencyConflictError)


@pytest.mark.asyncio
async def test_requeued_journey_is_consistent(orchestrator, stored_entry, queue_repo, journey_repo):
    entry = (await orchestrator.call(stored_entry, "doc-1")).unwrap()
    entry = (await orchestrator.mark_no_show(entry, "doc-1")).unwrap()
    entry = (await orchestrator.requeue(entry, "nurse-1")).unwrap()
    entry = (await orchestrator.call(entry, "doc-1")).unwrap()
    await orchestrator.drain()

    view = await GetQueueJourneyUseCase(queue_repo, journey_repo).execute("q-1")
    assert [s.step_type for s in view.steps] == [
        QueueStatus.CALLED,
        QueueStatus.NO_SHOW,
        QueueStatus.WAITING,
        QueueStatus.CALLED,
    ]
    assert view.is_consistent
    assert entry.timestamps_in_order()
