"""
Notification dispatcher interface used by the queue journey.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class NotificationService(ABC):
    """Abstract interface for best-effort staff notifications."""

    @abstractmethod
    async def notify(
        self,
        target_user_id: str,
        title: str,
        body: str,
        category: str,
        link_path: Optional[str] = None,
    ) -> None:
        """
        Send an in-app notification to one staff member.

        Raises:
            NotificationDeliveryError: if the transport rejected the notification
        """
        pass

    @abstractmethod
    async def notify_event(
        self,
        event_key: str,
        structure_id: Optional[str],
        subject: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Publish a clinic-wide event (e.g. ``no_show``) to its configured recipients.

        Recipient resolution and delivery (email, SMS) belong to the transport.
        """
        pass
