"""Notification Service Interface

Fire-and-forget messages to room members about lifecycle events.
"""

from abc import ABC, abstractmethod
from enum import Enum


class NotificationKind(str, Enum):
    PERIOD_STARTED = "period_started"
    PERIOD_ENDED = "period_ended"
    PERIOD_LOCKED = "period_locked"
    PERIOD_UNLOCKED = "period_unlocked"
    PERIOD_ARCHIVED = "period_archived"
    PERIOD_RESTARTED = "period_restarted"


class NotificationService(ABC):
    """
    Abstract notification service for telling room members what happened

    Implementations must not raise: a failed delivery never fails the
    operation that triggered it.
    """

    @abstractmethod
    async def notify_room(self, room_id: str, kind: NotificationKind, message: str) -> bool:
        """
        Notify all members of a room

        Args:
            room_id: Room whose members are notified
            kind: Event type
            message: Human readable text

        Returns:
            True if notification was delivered, False otherwise
        """
        pass
