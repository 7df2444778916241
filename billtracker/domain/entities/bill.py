"""Domain entity representing a bill instance owned by the ledger."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class Bill:
    """Bill due on a specific calendar day."""

    id: int
    user_id: int
    name: str
    amount: Decimal
    due_date: date
    is_paid: bool = False

    def formatted_amount(self) -> str:
        return f"${self.amount:.2f}"

    def formatted_due_date(self) -> str:
        """Return the due date as ``Fri Oct 17 2026``."""

        return self.due_date.strftime("%a %b %d %Y")


__all__ = ["Bill"]
