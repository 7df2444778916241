"""ORM models used by the application infrastructure."""

from .bill import BillModel
from .notification_log import NotificationLogModel
from .user import UserModel

__all__ = [
    "BillModel",
    "NotificationLogModel",
    "UserModel",
]
