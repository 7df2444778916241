"""Realtime notification helpers for the infrastructure layer."""

from .manager import (
    SseConnection,
    SseConnectionClosed,
    SseConnectionRegistry,
    SseHandle,
    format_sse_frame,
)
from .publisher import (
    CONNECTION_ESTABLISHED_EVENT,
    IN_APP_TEST_EVENT,
    InAppAlertSender,
    build_bill_alert,
    build_connection_greeting,
    build_test_alert,
)

__all__ = [
    "CONNECTION_ESTABLISHED_EVENT",
    "IN_APP_TEST_EVENT",
    "InAppAlertSender",
    "SseConnection",
    "SseConnectionClosed",
    "SseConnectionRegistry",
    "SseHandle",
    "build_bill_alert",
    "build_connection_greeting",
    "build_test_alert",
    "format_sse_frame",
]
