"""Helpers for sending bill reminder emails through SMTP or SendGrid."""

from __future__ import annotations

import json
import logging
import smtplib
from email.message import EmailMessage
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from billtracker.config import Settings, get_settings
from billtracker.domain.entities import Bill, DeliveryResult, NotificationChannel, User

logger = logging.getLogger(__name__)

CHANNEL = NotificationChannel.EMAIL
SMTP_TIMEOUT_SECONDS = 15


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    return None


def _sendgrid_error(exc: Exception) -> str:
    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return f"Error sending email via SendGrid: {exc}"


def _send_via_sendgrid(
    settings: Settings, subject: str, html_content: str, recipient: str
) -> DeliveryResult:
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return DeliveryResult.skipped(CHANNEL, "sendgrid not configured")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:
        error = _sendgrid_error(exc)
        logger.error(error)
        return DeliveryResult.failed(CHANNEL, error)

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        error = f"SendGrid API responded with status {status_code}"
        if details:
            error = f"{error}: {details}"
        logger.error(error)
        return DeliveryResult.failed(CHANNEL, error)

    return DeliveryResult.ok(CHANNEL)


def _send_via_smtp(
    settings: Settings, subject: str, html_content: str, recipient: str
) -> DeliveryResult:
    if not (settings.email_service_host and settings.email_from_address):
        logger.info("SMTP configuration incomplete; skipping email delivery")
        return DeliveryResult.skipped(CHANNEL, "smtp not configured")

    message = EmailMessage()
    message["From"] = f'"Bill Tracker" <{settings.email_from_address}>'
    message["To"] = recipient
    message["Subject"] = subject
    message.set_content("This reminder is best viewed in an HTML capable mail client.")
    message.add_alternative(html_content, subtype="html")

    smtp_class = smtplib.SMTP_SSL if settings.email_service_secure else smtplib.SMTP
    try:
        with smtp_class(
            settings.email_service_host,
            settings.email_service_port,
            timeout=SMTP_TIMEOUT_SECONDS,
        ) as client:
            if not settings.email_service_secure:
                client.ehlo()
                # Plain relays without STARTTLS are used as-is.
                if client.has_extn("starttls"):
                    client.starttls()
            if settings.email_service_user:
                client.login(settings.email_service_user, settings.email_service_pass or "")
            client.send_message(message)
    except (smtplib.SMTPException, OSError) as exc:
        error = f"SMTP delivery to {recipient} failed: {exc}"
        logger.error(error)
        return DeliveryResult.failed(CHANNEL, error)

    return DeliveryResult.ok(CHANNEL)


def send_email(subject: str, html_content: str, recipient: str) -> DeliveryResult:
    """Send an email with the configured transport."""

    settings = get_settings()
    if settings.email_backend == "sendgrid":
        return _send_via_sendgrid(settings, subject, html_content, recipient)
    return _send_via_smtp(settings, subject, html_content, recipient)


def build_bill_reminder_email(bill: Bill, message: str, frontend_url: str) -> tuple[str, str]:
    """Return the subject and HTML body of a bill reminder."""

    subject = f"Bill Reminder: {bill.name} Due Soon!"
    html_content = "".join(
        (
            f"<p>{escape(message)}</p>",
            f'<p>Your bill "{escape(bill.name)}" for {bill.formatted_amount()} '
            f"is due on {bill.formatted_due_date()}.</p>",
            f"<p>Manage your bills: {escape(frontend_url.rstrip('/'))}/dashboard</p>",
        )
    )
    return subject, html_content


def send_bill_reminder_email(user: User, bill: Bill, message: str) -> DeliveryResult:
    """Email ``user`` about ``bill`` unless they opted out or have no address."""

    if not user.preferences.email_enabled or not user.email:
        logger.info("Email notifications disabled or no email for user %s", user.id)
        return DeliveryResult.skipped(CHANNEL, "email disabled or missing address")

    subject, html_content = build_bill_reminder_email(
        bill, message, get_settings().frontend_url
    )
    result = send_email(subject, html_content, user.email)
    if result.delivered:
        logger.info("Email sent to %s for bill %s", user.email, bill.name)
    return result


__all__ = [
    "build_bill_reminder_email",
    "send_bill_reminder_email",
    "send_email",
]
