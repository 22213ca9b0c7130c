"""Notification Service Implementations

Provides concrete implementations for telling room members about period
lifecycle events.
"""

import logging
from datetime import datetime
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationKind, NotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs events

    Useful for development and testing, or as a fallback.
    """

    async def notify_room(self, room_id: str, kind: NotificationKind, message: str) -> bool:
        """
        Log room notification

        Returns:
            Always True (logging never fails)
        """
        logger.info(f"[ROOM NOTICE] Room: {room_id}, Kind: {kind.value}, Message: {message}")
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that posts events to an HTTP webhook

    The receiving side fans the message out to room members.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST notifications to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def notify_room(self, room_id: str, kind: NotificationKind, message: str) -> bool:
        """
        Send room notification via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": kind.value,
            "room_id": room_id,
            "message": message,
            "sent_at": datetime.utcnow().isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Webhook notification {kind.value} sent for room {room_id}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook notification {kind.value} for room {room_id}: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending webhook notification for room {room_id}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def notify_room(self, room_id: str, kind: NotificationKind, message: str) -> bool:
        """
        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.notify_room(room_id, kind, message):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
