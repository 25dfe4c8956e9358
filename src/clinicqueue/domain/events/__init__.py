"""
Domain events package.
"""

from .queue_events import QueueTransitioned

__all__ = [
    "QueueTransitioned",
]
