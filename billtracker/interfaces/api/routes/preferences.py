"""Routes for the notification settings page."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from billtracker.application.use_cases.notifications import (
    get_notification_preferences,
    update_notification_preferences,
)
from billtracker.infrastructure.database import get_db
from billtracker.interfaces.api.dependencies import AuthenticatedUser, get_current_user
from billtracker.interfaces.api.schemas import (
    MessageResponse,
    NotificationSettingsRead,
    NotificationSettingsUpdate,
)

router = APIRouter(prefix="/api/users/me/notifications", tags=["notification settings"])


@router.get("", response_model=NotificationSettingsRead)
def read_notification_settings(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> NotificationSettingsRead:
    try:
        preferences = get_notification_preferences(db, current_user.id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationSettingsRead.from_preferences(preferences)


@router.put("", response_model=MessageResponse)
def update_notification_settings(
    settings_in: NotificationSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
    """Replace the caller's notification preferences."""

    try:
        update_notification_preferences(
            db,
            current_user.id,
            email_enabled=settings_in.is_email_notification_enabled,
            slack_enabled=settings_in.is_slack_notification_enabled,
            slack_webhook_url=settings_in.slack_webhook_url,
            in_app_enabled=settings_in.in_app_alerts_enabled,
            offsets=settings_in.notification_time_offsets,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MessageResponse(message="Notification settings updated successfully")
