"""
Identity lookup interface for display names in notifications.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IdentityService(ABC):
    """Resolves display names. ``None`` means the name is unknown."""

    @abstractmethod
    async def get_patient_display_name(self, patient_id: str) -> Optional[str]:
        pass

    @abstractmethod
    async def get_staff_display_name(self, staff_id: str) -> Optional[str]:
        pass
