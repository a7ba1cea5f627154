from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from expense_tracker.db.base import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class Expense(Base):
    __tablename__ = "expenses"
    # NULL keys never collide, so keyless seed rows coexist with keyed ones.
    __table_args__ = (UniqueConstraint("idempotency_key", name="uq_expenses_idempotency_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Minor units (cents); never a float.
    amount: Mapped[int] = mapped_column(Integer)
    category: Mapped[str] = mapped_column(String(32), index=True)
    description: Mapped[str] = mapped_column(String(200))
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"Expense(id={self.id!r}, amount={self.amount!r}, category={self.category!r}, date={self.date!r})"
