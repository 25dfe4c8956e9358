"""FastAPI dependency providers."""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Request

from ..adapters.db.mongo.repositories.activity_log_repository import MongoActivityLogger
from ..adapters.db.mongo.repositories.directory_repository import MongoIdentityService
from ..adapters.db.mongo.repositories.journey_step_repository import (
    MongoJourneyStepRepository,
)
from ..adapters.db.mongo.repositories.queue_entry_repository import (
    MongoQueueEntryRepository,
)
from ..adapters.notifications.mongo_notification_service import MongoNotificationService
from ..application.ports.repositories.journey_step_repo import JourneyStepRepository
from ..application.ports.repositories.queue_entry_repo import QueueEntryRepository
from ..application.use_cases.get_clinic_queue import GetClinicQueueUseCase
from ..application.use_cases.get_queue_journey import GetQueueJourneyUseCase
from ..application.use_cases.transition_queue_entry import TransitionOrchestrator
from ..core.config import get_settings


@lru_cache()
def get_queue_repository() -> QueueEntryRepository:
    """Get queue entry repository instance."""
    return MongoQueueEntryRepository()


@lru_cache()
def get_journey_repository() -> JourneyStepRepository:
    """Get journey step repository instance."""
    return MongoJourneyStepRepository()


@lru_cache()
def get_transition_orchestrator() -> TransitionOrchestrator:
    """Get the process-wide orchestrator (it tracks pending side effects)."""
    return TransitionOrchestrator(
        queue_repository=get_queue_repository(),
        journey_repository=get_journey_repository(),
        notification_service=MongoNotificationService(),
        activity_logger=MongoActivityLogger(),
        identity_service=MongoIdentityService(),
        settings=get_settings().queue,
    )


def get_queue_journey_use_case(
    queue_repository: Annotated[QueueEntryRepository, Depends(get_queue_repository)],
    journey_repository: Annotated[JourneyStepRepository, Depends(get_journey_repository)],
) -> GetQueueJourneyUseCase:
    return GetQueueJourneyUseCase(queue_repository, journey_repository, get_settings().queue)


def get_clinic_queue_use_case(
    queue_repository: Annotated[QueueEntryRepository, Depends(get_queue_repository)],
) -> GetClinicQueueUseCase:
    return GetClinicQueueUseCase(queue_repository, get_settings().queue)


def get_current_actor(request: Request) -> Optional[str]:
    """Authenticated staff member, when an auth layer has set one on the request."""
    return getattr(request.state, "user_id", None)


# Dependency annotations for FastAPI
OrchestratorDep = Annotated[TransitionOrchestrator, Depends(get_transition_orchestrator)]
QueueJourneyDep = Annotated[GetQueueJourneyUseCase, Depends(get_queue_journey_use_case)]
ClinicQueueDep = Annotated[GetClinicQueueUseCase, Depends(get_clinic_queue_use_case)]
CurrentActorDep = Annotated[Optional[str], Depends(get_current_actor)]
