from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from enum import StrEnum
from typing import Any

from expense_tracker.client.api import ExpenseApiClient, ExpenseApiError
from expense_tracker.core.logging import get_logger
from expense_tracker.domain.enums import SortOrder
from expense_tracker.domain.money import cents_to_money, dollars_to_cents

logger = get_logger()


def new_idempotency_key() -> str:
    """128 random bits; collisions are not a practical concern."""
    return str(uuid.uuid4())


def _today() -> str:
    return date.today().isoformat()


class SubmissionState(StrEnum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass(slots=True)
class ExpenseFilters:
    category: str = ""
    sort: str = SortOrder.DATE_DESC.value


@dataclass(frozen=True, slots=True)
class ExpenseSummary:
    total_cents: int
    count: int

    @property
    def total_display(self) -> str:
        return cents_to_money(self.total_cents)


class ExpenseBook:
    """Client-side expense state: the visible list, filters, and the submission state machine.

    ``idle -> submitting -> idle``; a failed attempt leaves ``error`` set until
    ``clear_error`` or the next request.
    """

    def __init__(self, api: ExpenseApiClient) -> None:
        self.api = api
        self.expenses: list[dict[str, Any]] = []
        self.categories: list[str] = []
        self.filters = ExpenseFilters()
        self.error: str | None = None
        self.loading = False
        self.state = SubmissionState.IDLE
        self.last_replayed = False
        self._submit_lock = threading.Lock()

    @property
    def submitting(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    def refresh(self) -> bool:
        self.loading = True
        self.error = None
        try:
            self.expenses = self.api.list_expenses(
                category=self.filters.category or None,
                sort=self.filters.sort or None,
            )
            return True
        except ExpenseApiError as exc:
            self.error = exc.message
            return False
        finally:
            self.loading = False

    def load_categories(self) -> None:
        try:
            self.categories = self.api.get_categories()
        except ExpenseApiError as exc:
            logger.warning("Failed to fetch categories: %s", exc.message)

    def update_filters(self, **changes: str) -> bool:
        self.filters = replace(self.filters, **changes)
        return self.refresh()

    def add_expense(self, values: dict[str, Any]) -> bool:
        """Submit one attempt with a freshly minted idempotency key.

        ``values["amount"]`` is in dollars as typed; it is sent in cents.
        Returns False without a request while another submission is in flight.
        """
        if not self._submit_lock.acquire(blocking=False):
            return False
        self.state = SubmissionState.SUBMITTING
        self.error = None
        try:
            try:
                amount_cents = dollars_to_cents(values.get("amount", ""))
            except ValueError:
                self.error = "Amount must be a valid dollar amount"
                return False
            payload = {
                "amount": amount_cents,
                "category": values.get("category", ""),
                "description": values.get("description", ""),
                "date": values.get("date", ""),
                # Each attempt gets its own key. A request that committed but whose
                # response was lost is not matched by a retry.
                "idempotencyKey": new_idempotency_key(),
            }
            try:
                _, self.last_replayed = self.api.create_expense(payload)
            except ExpenseApiError as exc:
                self.error = exc.message
                return False
            # Re-fetch so the new record lands in its sorted position.
            self.refresh()
            return True
        finally:
            self.state = SubmissionState.IDLE
            self._submit_lock.release()

    def clear_error(self) -> None:
        self.error = None

    @property
    def summary(self) -> ExpenseSummary:
        return ExpenseSummary(
            total_cents=sum(int(expense["amount"]) for expense in self.expenses),
            count=len(self.expenses),
        )


@dataclass(slots=True)
class ExpenseForm:
    amount: str = ""
    category: str = ""
    description: str = ""
    date: str = field(default_factory=_today)

    @property
    def is_complete(self) -> bool:
        try:
            positive = dollars_to_cents(self.amount) > 0
        except ValueError:
            positive = False
        return positive and bool(self.category) and bool(self.description.strip()) and bool(self.date)

    def values(self) -> dict[str, str]:
        return {
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.date,
        }

    def reset(self) -> None:
        self.amount = ""
        self.category = ""
        self.description = ""
        self.date = _today()

    def submit(self, book: ExpenseBook) -> bool:
        """Send the form through ``book``; clear it on success, keep it on failure."""
        if book.submitting:
            return False
        ok = book.add_expense(self.values())
        if ok:
            self.reset()
        return ok
