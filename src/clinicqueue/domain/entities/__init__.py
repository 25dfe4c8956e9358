"""
Domain entities package.
"""

from .journey_step import JourneyStep
from .queue_entry import QueueEntry

__all__ = [
    "QueueEntry",
    "JourneyStep",
]
