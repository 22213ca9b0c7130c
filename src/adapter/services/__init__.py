from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .cache_backend import MemoryCacheBackend, RedisCacheBackend, create_cache_backend

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "create_cache_backend",
]
