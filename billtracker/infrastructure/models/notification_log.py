"""SQLAlchemy model for the reminder delivery log."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from billtracker.infrastructure.database import Base
from billtracker.utils import now_in_app_naive_datetime


class NotificationLogModel(Base):
    """One row per user, bill, channel and calendar day."""

    __tablename__ = "notification_logs"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "bill_id",
            "notification_type",
            "sent_on",
            name="unique_notification_per_day",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    bill_id = Column(Integer, ForeignKey("bills.id"), nullable=False, index=True)
    notification_type = Column(String(20), nullable=False)
    message_content = Column(Text, nullable=True)
    sent_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    sent_on = Column(Date, nullable=False)


__all__ = ["NotificationLogModel"]
