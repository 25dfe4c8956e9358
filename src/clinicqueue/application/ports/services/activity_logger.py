"""
Activity logger interface (analytics trail of staff actions).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ActivityLogger(ABC):
    """Abstract interface for best-effort activity logging."""

    @abstractmethod
    async def log(
        self,
        structure_id: str,
        actor_id: str,
        action: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Record that ``actor_id`` performed ``action`` in clinic ``structure_id``."""
        pass
