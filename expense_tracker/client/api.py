from __future__ import annotations

from typing import Any

import httpx

from expense_tracker.core.config import get_settings


class ExpenseApiError(Exception):
    """A request that did not succeed, with text suitable for an error banner."""

    def __init__(self, message: str, status_code: int | None = None, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


def _error_from_response(response: httpx.Response, fallback: str) -> ExpenseApiError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        message = ", ".join(
            str(error.get("message", error)) if isinstance(error, dict) else str(error) for error in errors
        )
        return ExpenseApiError(message, response.status_code, [e for e in errors if isinstance(e, dict)])
    return ExpenseApiError(body.get("message") or fallback, response.status_code)


class ExpenseApiClient:
    """Thin httpx wrapper over the expense service's JSON API."""

    def __init__(self, base_url: str | None = None, http: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self._owns_http = http is None
        if http is None:
            http = httpx.Client(
                base_url=base_url or get_settings().base_url,
                timeout=timeout,
                headers={"Content-Type": "application/json"},
            )
        self._http = http

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> ExpenseApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, fallback: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise ExpenseApiError(fallback) from exc
        if response.is_error:
            raise _error_from_response(response, fallback)
        return response

    def create_expense(self, payload: dict[str, Any]) -> tuple[dict[str, Any], bool]:
        """Returns the record and whether the server had already stored it."""
        response = self._request("POST", "/expenses", "Failed to create expense", json=payload)
        return response.json()["data"], response.status_code == httpx.codes.OK

    def list_expenses(self, category: str | None = None, sort: str | None = None) -> list[dict[str, Any]]:
        params = {key: value for key, value in (("category", category), ("sort", sort)) if value}
        response = self._request("GET", "/expenses", "Failed to fetch expenses", params=params)
        return response.json()["data"]

    def get_categories(self) -> list[str]:
        response = self._request("GET", "/categories", "Failed to fetch categories")
        return response.json()["data"]
