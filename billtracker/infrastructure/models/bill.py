"""SQLAlchemy model for the shared ``bills`` table."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import expression

from billtracker.infrastructure.database import Base


class BillModel(Base):
    """Bill rows written by the ledger service and read by the reminder job."""

    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    is_paid = Column(Boolean, nullable=False, default=False, server_default=expression.false())


__all__ = ["BillModel"]
