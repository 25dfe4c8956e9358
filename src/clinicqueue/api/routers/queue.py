"""Queue endpoints: live queue, entry state, timeline, and staff actions."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from ...domain.enums.workflow import QueueAction, QueueStatus
from ...domain.errors import ConcurrencyConflictError
from ...application.use_cases.transition_queue_entry import available_actions
from ..deps import ClinicQueueDep, CurrentActorDep, OrchestratorDep, QueueJourneyDep
from ..schemas.common import ApiResponse, ErrorResponse
from ..schemas.queue import (
    ClinicQueueSchema,
    JourneySchema,
    JourneyStepSchema,
    QueueEntryDetailSchema,
    QueueEntrySchema,
    TransitionRequestSchema,
    TransitionResponseSchema,
)
from ..utils.responses import ok

router = APIRouter(prefix="/queue", tags=["queue"])
logger = logging.getLogger("clinicqueue")


@router.get("", response_model=ApiResponse[ClinicQueueSchema])
async def list_clinic_queue(
    request: Request,
    clinic_queue: ClinicQueueDep,
    structure_id: str = Query(..., description="Clinic (structure) ID"),
    status_filter: Optional[List[QueueStatus]] = Query(None, alias="status", description="Repeatable status filter"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """
    Live queue of a clinic ordered by priority then arrival.

    Each entry carries its waiting time and available actions. The stats are
    computed over the returned entries.
    """
    view = await clinic_queue.execute(
        structure_id, statuses=status_filter, limit=limit, offset=offset
    )
    return ok(request, data=ClinicQueueSchema.from_view(view))


@router.get(
    "/{entry_id}",
    response_model=ApiResponse[QueueEntryDetailSchema],
    responses={404: {"model": ErrorResponse, "description": "Queue entry not found"}},
)
async def get_queue_entry(request: Request, entry_id: str, journey: QueueJourneyDep):
    """
    Current state of a queue entry.

    Includes the waiting time, its urgency bucket and the actions the UI may
    offer from the current status.
    """
    view = await journey.execute(entry_id, include_steps=False)
    return ok(request, data=QueueEntryDetailSchema.from_view(view))


@router.get(
    "/{entry_id}/journey",
    response_model=ApiResponse[JourneySchema],
    responses={404: {"model": ErrorResponse, "description": "Queue entry not found"}},
)
async def get_queue_journey(request: Request, entry_id: str, journey: QueueJourneyDep):
    """Ordered journey timeline of a queue entry."""
    view = await journey.execute(entry_id)
    if not view.is_consistent:
        logger.warning(f"Journey of queue entry {entry_id} does not match its stored status")
    return ok(
        request,
        data=JourneySchema(
            entry_id=entry_id,
            status=view.entry.status,
            consistent=view.is_consistent,
            steps=[JourneyStepSchema.from_step(step) for step in view.steps],
        ),
    )


@router.post(
    "/{entry_id}/actions/{action}",
    response_model=ApiResponse[TransitionResponseSchema],
    status_code=status.HTTP_200_OK,
    responses={
        404: {"model": ErrorResponse, "description": "Queue entry not found"},
        409: {"model": ErrorResponse, "description": "State changed, refresh and retry"},
        422: {"model": ErrorResponse, "description": "Action not available from the current state"},
        503: {"model": ErrorResponse, "description": "Queue store unavailable"},
    },
)
async def perform_queue_action(
    request: Request,
    entry_id: str,
    action: QueueAction,
    body: TransitionRequestSchema,
    journey: QueueJourneyDep,
    orchestrator: OrchestratorDep,
    current_actor: CurrentActorDep,
):
    """
    Apply a staff action to a queue entry.

    The entry is read, then the action runs against that snapshot. Conflicts
    are never retried server side: the client must refresh and decide again.
    """
    entry = await journey.get_entry(entry_id)
    if body.expected_status is not None and body.expected_status is not entry.status:
        raise ConcurrencyConflictError(entry_id, body.expected_status)

    actor_id = current_actor or body.actor_id
    result = await orchestrator.perform(
        action, entry, actor_id, notes=body.notes, assigned_to=body.assigned_to
    )
    updated = result.unwrap()

    return ok(
        request,
        data=TransitionResponseSchema(
            action=action,
            entry=QueueEntrySchema.from_entry(updated),
            available_actions=available_actions(updated),
        ),
        message=f"{action.value} applied",
    )
