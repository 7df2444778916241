"""Event stream and diagnostic endpoints for realtime notifications."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from billtracker.application.use_cases.notifications import (
    SlackWebhookNotConfigured,
    send_in_app_test,
    send_slack_test,
)
from billtracker.config import get_settings
from billtracker.infrastructure.database import get_db
from billtracker.infrastructure.notifications import (
    SseConnection,
    SseConnectionRegistry,
    build_connection_greeting,
    format_sse_frame,
)
from billtracker.infrastructure.slack import SlackDeliveryError
from billtracker.interfaces.api.dependencies import (
    AuthenticatedUser,
    get_current_user,
    get_sse_registry,
    oauth2_scheme,
    resolve_token,
)
from billtracker.interfaces.api.schemas import InAppTestResponse, MessageResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keep-alive\n\n"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def stream_events(
    request: Request,
    registry: SseConnectionRegistry,
    connection: SseConnection,
    *,
    keepalive: float,
) -> AsyncIterator[str]:
    """Yield frames queued for ``connection`` until the client goes away."""

    user_id = connection.user_id
    registry.register(user_id, connection)
    try:
        yield format_sse_frame(build_connection_greeting())
        while not await request.is_disconnected():
            frame = await connection.next_frame(keepalive)
            if frame is not None:
                yield frame
            elif connection.closed:
                break
            else:
                yield KEEPALIVE_FRAME
    finally:
        connection.close()
        registry.deregister(user_id, connection)


@router.get("/stream")
async def notification_stream(
    request: Request,
    token: str | None = Query(default=None, description="Bearer token for EventSource clients"),
    header_token: str | None = Depends(oauth2_scheme),
    registry: SseConnectionRegistry = Depends(get_sse_registry),
) -> StreamingResponse:
    """Open a Server-Sent Events stream for the authenticated user.

    ``EventSource`` cannot set headers, so the token is usually passed as the
    ``token`` query parameter.
    """

    user = resolve_token(token or header_token)
    settings = get_settings()
    connection = SseConnection(user.id, max_queue=settings.sse_queue_size)
    return StreamingResponse(
        stream_events(request, registry, connection, keepalive=settings.sse_keepalive_seconds),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/test-slack", response_model=MessageResponse)
def test_slack(
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
    """Send a test message to the caller's Slack webhook."""

    try:
        send_slack_test(db, current_user.id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SlackWebhookNotConfigured as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SlackDeliveryError as exc:
        logger.error("Error sending test Slack message: %s", exc)
        if exc.status_code is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"Failed to send test message: Slack responded with status "
                    f"{exc.status_code} - {exc.reason}. Please check your webhook URL."
                ),
            ) from exc
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not reach the Slack webhook.",
        ) from exc

    return MessageResponse(message="Test Slack message sent successfully!")


@router.post("/test-in-app", response_model=InAppTestResponse)
def test_in_app(
    current_user: AuthenticatedUser = Depends(get_current_user),
    registry: SseConnectionRegistry = Depends(get_sse_registry),
) -> InAppTestResponse:
    """Push a test alert to the caller's open streams."""

    result = send_in_app_test(registry, current_user.id, current_user.username)
    return InAppTestResponse(delivered=result.delivered)
