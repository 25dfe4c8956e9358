"""
API schemas package.
"""

from .common import ApiResponse, ErrorResponse
from .queue import (
    ClinicQueueSchema,
    JourneySchema,
    JourneyStepSchema,
    QueueEntryDetailSchema,
    QueueEntrySchema,
    QueueStatsSchema,
    TransitionRequestSchema,
    TransitionResponseSchema,
    WaitingTimeSchema,
)

__all__ = [
    "ApiResponse",
    "ClinicQueueSchema",
    "ErrorResponse",
    "JourneySchema",
    "JourneyStepSchema",
    "QueueEntryDetailSchema",
    "QueueEntrySchema",
    "QueueStatsSchema",
    "TransitionRequestSchema",
    "TransitionResponseSchema",
    "WaitingTimeSchema",
]
