from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.core.errors import IdempotencyConflictError, StorageFaultError
from expense_tracker.core.logging import get_logger
from expense_tracker.db.models import Expense
from expense_tracker.domain.enums import CreateOutcome, SortOrder
from expense_tracker.domain.validation import validate_expense

logger = get_logger()


@dataclass(frozen=True, slots=True)
class CreateResult:
    expense: Expense
    outcome: CreateOutcome

    @property
    def was_existing(self) -> bool:
        return self.outcome is CreateOutcome.ALREADY_EXISTED


def find_by_idempotency_key(db: Session, idempotency_key: str) -> Expense | None:
    return db.scalar(select(Expense).where(Expense.idempotency_key == idempotency_key))


def create_expense(db: Session, payload: Mapping[str, Any]) -> CreateResult:
    """Insert an expense at most once per idempotency key.

    The lookup below is only a fast path for sequential retries. Two racing
    requests can both miss it; the unique constraint then rejects the loser's
    insert and the loser answers with the winner's row.
    """
    draft = validate_expense(payload)
    key = draft.idempotency_key

    try:
        if key:
            existing = find_by_idempotency_key(db, key)
            if existing is not None:
                logger.info("Replayed expense id=%s for a repeated idempotency key", existing.id)
                return CreateResult(existing, CreateOutcome.ALREADY_EXISTED)

        expense = Expense(
            amount=draft.amount,
            category=draft.category,
            description=draft.description,
            date=draft.date,
            idempotency_key=key,
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)
    except IntegrityError as exc:
        db.rollback()
        if not key:
            raise StorageFaultError("Expense insert rejected by the store") from exc
        return _recover_from_conflict(db, key)
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageFaultError("Expense store failed during create") from exc

    logger.info("Created expense id=%s category=%s amount=%s", expense.id, expense.category, expense.amount)
    return CreateResult(expense, CreateOutcome.CREATED)


def _recover_from_conflict(db: Session, key: str) -> CreateResult:
    try:
        existing = find_by_idempotency_key(db, key)
    except SQLAlchemyError as exc:
        raise StorageFaultError("Expense store failed while resolving a key conflict") from exc
    if existing is None:
        logger.warning("Idempotency key conflict could not be resolved to an existing expense")
        raise IdempotencyConflictError(key)
    logger.info("Absorbed concurrent create for expense id=%s", existing.id)
    return CreateResult(existing, CreateOutcome.ALREADY_EXISTED)


def list_expenses(db: Session, category: str | None = None, sort: str | None = None) -> list[Expense]:
    stmt = select(Expense)
    if category:
        stmt = stmt.where(Expense.category == category)
    # Same-date rows fall back to insertion order, in the same direction as the date.
    if sort == SortOrder.DATE_ASC:
        stmt = stmt.order_by(Expense.date.asc(), Expense.id.asc())
    else:
        stmt = stmt.order_by(Expense.date.desc(), Expense.id.desc())
    try:
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as exc:
        raise StorageFaultError("Expense store failed during list") from exc
