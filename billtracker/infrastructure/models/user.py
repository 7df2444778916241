"""SQLAlchemy model for the shared ``users`` table."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.sql import expression

from billtracker.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a user.

    The table belongs to the user service; only the notification preference
    columns are written from here.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    is_email_notification_enabled = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_slack_notification_enabled = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    slack_webhook_url = Column(String(512), nullable=True)
    in_app_alerts_enabled = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    notification_time_offsets = Column(String(255), nullable=True)


__all__ = ["UserModel"]
