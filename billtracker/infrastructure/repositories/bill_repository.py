"""Read access to ledger bills."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from billtracker.domain.entities import Bill
from billtracker.infrastructure.models import BillModel


class BillRepository:
    """Query bills owned by the ledger service."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_unpaid_due_on(self, user_id: int, day: date) -> Sequence[Bill]:
        """Return the unpaid bills of ``user_id`` falling on ``day``."""

        query = (
            self.session.query(BillModel)
            .filter(BillModel.user_id == user_id)
            .filter(BillModel.is_paid.is_(False))
            .filter(BillModel.due_date >= day)
            .filter(BillModel.due_date < day + timedelta(days=1))
            .order_by(BillModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: BillModel) -> Bill:
        return Bill(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            amount=Decimal(model.amount),
            due_date=model.due_date,
            is_paid=bool(model.is_paid),
        )


__all__ = ["BillRepository"]
