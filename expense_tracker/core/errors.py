from __future__ import annotations

from typing import Any


class ExpenseTrackerError(Exception):
    pass


class ExpenseValidationError(ExpenseTrackerError):
    """One or more field rules failed; nothing was written."""

    def __init__(self, violations: list[dict[str, Any]]) -> None:
        self.violations = violations
        fields = ", ".join(str(v["field"]) for v in violations)
        super().__init__(f"Invalid expense fields: {fields}")


class IdempotencyConflictError(ExpenseTrackerError):
    def __init__(self, idempotency_key: str) -> None:
        self.idempotency_key = idempotency_key
        super().__init__("Duplicate entry detected. This request was already processed.")


class StorageFaultError(ExpenseTrackerError):
    pass


class StorageUnavailableError(StorageFaultError):
    pass
