"""Run the bill reminder job once from the command line."""

from __future__ import annotations

import argparse
import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from billtracker.infrastructure.database import initialize_database
from billtracker.infrastructure.scheduler import run_detached


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for a manual reminder run."""

    parser = argparse.ArgumentParser(
        description="Send the bill reminders due today (or on --date).",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to run for, as YYYY-MM-DD (default: today in APP_TIMEZONE)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every delivery attempt.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    initialize_database()

    try:
        summary = run_detached(args.date)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Reminder run failed: {exc}") from exc

    print(
        f"Reminder run for {summary.run_date}:\n"
        f"  Users: {summary.users}\n"
        f"  Bills: {summary.bills}\n"
        f"  Delivered: {dict(summary.delivered)}\n"
        f"  Skipped: {dict(summary.skipped)}\n"
        f"  Failed: {dict(summary.failed)}\n"
        f"  Already sent: {dict(summary.suppressed)}"
    )
    if summary.aborted:
        raise SystemExit("Reminder run aborted: " + "; ".join(summary.errors))


if __name__ == "__main__":
    main()
