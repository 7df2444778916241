"""Repository implementations for infrastructure layer."""

from .bill_repository import BillRepository
from .notification_log_repository import NotificationLogRepository
from .user_repository import UserRepository

__all__ = [
    "BillRepository",
    "NotificationLogRepository",
    "UserRepository",
]
