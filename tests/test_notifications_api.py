"""Integration tests for the notification settings and diagnostic endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from billtracker.application.use_cases.notifications import diagnostics as diagnostics_module
from billtracker.infrastructure.security import create_access_token
from billtracker.infrastructure.slack import SlackDeliveryError
from billtracker.interfaces.api.routes import preferences as preferences_routes

WEBHOOK = "https://hooks.slack.com/services/T000/B000/XXXX"


class RecordingStream:
    def __init__(self) -> None:
        self.frames: list[str] = []

    def write(self, frame: str) -> None:
        self.frames.append(frame)


@pytest.fixture()
def client(db_session):
    """Return a test client bound to a clean application instance."""

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _auth(user_id: int, username: str = "tester") -> dict[str, str]:
    token = create_access_token({"id": user_id, "username": username})
    return {"Authorization": f"Bearer {token}"}


def test_settings_round_trip(client: TestClient, make_user) -> None:
    user = make_user()
    headers = _auth(user.id)

    response = client.put(
        "/api/users/me/notifications",
        json={
            "is_email_notification_enabled": True,
            "is_slack_notification_enabled": True,
            "slack_webhook_url": WEBHOOK,
            "in_app_alerts_enabled": False,
            "notification_time_offsets": [5, 1, 10, 5],
        },
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Notification settings updated successfully"}

    response = client.get("/api/users/me/notifications", headers=headers)
    assert response.status_code == 200
    assert response.json() == {
        "is_email_notification_enabled": True,
        "is_slack_notification_enabled": True,
        "slack_webhook_url": WEBHOOK,
        "in_app_alerts_enabled": False,
        "notification_time_offsets": [1, 5, 10],
    }


def test_settings_reject_negative_offsets(client: TestClient, make_user) -> None:
    user = make_user()

    response = client.put(
        "/api/users/me/notifications",
        json={"notification_time_offsets": [3, -1]},
        headers=_auth(user.id),
    )

    assert response.status_code == 422


def test_settings_reject_non_http_webhook(client: TestClient, make_user) -> None:
    user = make_user()

    response = client.put(
        "/api/users/me/notifications",
        json={"slack_webhook_url": "ftp://example.com/hook"},
        headers=_auth(user.id),
    )

    assert response.status_code == 422


def test_settings_for_unknown_user(client: TestClient, db_session) -> None:
    headers = _auth(404)

    assert client.get("/api/users/me/notifications", headers=headers).status_code == 404
    response = client.put(
        "/api/users/me/notifications",
        json={"notification_time_offsets": [1]},
        headers=headers,
    )
    assert response.status_code == 404


def test_authentication_errors(client: TestClient) -> None:
    missing = client.get("/api/users/me/notifications")
    invalid = client.get(
        "/api/users/me/notifications", headers={"Authorization": "Bearer not-a-token"}
    )
    stream_missing = client.get("/api/notifications/stream")
    stream_invalid = client.get("/api/notifications/stream", params={"token": "not-a-token"})

    assert missing.status_code == 401
    assert missing.json() == {"detail": "Authentication token required."}
    assert invalid.status_code == 403
    assert invalid.json() == {"detail": "Invalid or expired token."}
    assert stream_missing.status_code == 401
    assert stream_invalid.status_code == 403


def test_database_errors_are_reported_without_details(
    client: TestClient, make_user, monkeypatch: pytest.MonkeyPatch
) -> None:
    user = make_user()

    def broken(session, user_id):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(preferences_routes, "get_notification_preferences", broken)

    response = client.get("/api/users/me/notifications", headers=_auth(user.id))

    assert response.status_code == 500
    assert response.json() == {"detail": "Database error"}


def test_slack_test_requires_webhook(client: TestClient, make_user) -> None:
    user = make_user()

    response = client.post("/api/notifications/test-slack", headers=_auth(user.id))

    assert response.status_code == 400
    assert response.json() == {"detail": "Slack webhook URL not configured for this user."}


def test_slack_test_success(client: TestClient, make_user, monkeypatch) -> None:
    user = make_user(username="sam", slack_webhook_url=WEBHOOK)
    calls = []
    monkeypatch.setattr(
        diagnostics_module,
        "send_test_slack_message",
        lambda url, username: calls.append((url, username)),
    )

    response = client.post("/api/notifications/test-slack", headers=_auth(user.id))

    assert response.status_code == 200
    assert response.json() == {"message": "Test Slack message sent successfully!"}
    assert calls == [(WEBHOOK, "sam")]


def test_slack_test_reports_rejection(client: TestClient, make_user, monkeypatch) -> None:
    user = make_user(slack_webhook_url=WEBHOOK)

    def rejected(url, username):
        raise SlackDeliveryError("rejected", status_code=404, reason="Not Found")

    monkeypatch.setattr(diagnostics_module, "send_test_slack_message", rejected)

    response = client.post("/api/notifications/test-slack", headers=_auth(user.id))

    assert response.status_code == 400
    assert response.json()["detail"] == (
        "Failed to send test message: Slack responded with status 404 - Not Found. "
        "Please check your webhook URL."
    )


def test_slack_test_reports_unreachable_webhook(client: TestClient, make_user, monkeypatch) -> None:
    user = make_user(slack_webhook_url=WEBHOOK)

    def unreachable(url, username):
        raise SlackDeliveryError("Could not reach Slack webhook")

    monkeypatch.setattr(diagnostics_module, "send_test_slack_message", unreachable)

    response = client.post("/api/notifications/test-slack", headers=_auth(user.id))

    assert response.status_code == 502


def test_slack_test_for_unknown_user(client: TestClient, db_session) -> None:
    response = client.post("/api/notifications/test-slack", headers=_auth(404))

    assert response.status_code == 404


def test_in_app_test_reports_delivery(client: TestClient, make_user) -> None:
    user = make_user()
    headers = _auth(user.id, "sam")

    offline = client.post("/api/notifications/test-in-app", headers=headers)

    stream = RecordingStream()
    client.app.state.sse_registry.register(user.id, stream)
    online = client.post("/api/notifications/test-in-app", headers=headers)

    assert offline.json() == {"delivered": False}
    assert online.json() == {"delivered": True}
    assert "BillTracker test alert for sam" in stream.frames[0]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "sse_clients": 0}


def test_settings_of_new_user_have_no_offsets(client: TestClient, make_user) -> None:
    user = make_user(offsets=None)

    response = client.get("/api/users/me/notifications", headers=_auth(user.id))

    assert response.status_code == 200
    assert response.json()["notification_time_offsets"] == []
    assert response.json()["slack_webhook_url"] is None
