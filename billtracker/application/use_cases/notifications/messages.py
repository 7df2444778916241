"""Reminder wording."""


def reminder_message(days_remaining: int) -> str:
    """Return the status line shown in every channel for a bill."""

    if days_remaining == 0:
        return "It's due today!"
    if days_remaining > 0:
        return f"It's due in {days_remaining} day(s)."
    return f"It was due {abs(days_remaining)} day(s) ago."


__all__ = ["reminder_message"]
