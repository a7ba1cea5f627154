from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from expense_tracker.api import routes_categories, routes_expenses, routes_health
from expense_tracker.api.schemas import ErrorEnvelope
from expense_tracker.core.config import get_settings
from expense_tracker.core.errors import (
    ExpenseValidationError,
    IdempotencyConflictError,
    StorageFaultError,
)
from expense_tracker.core.logging import get_logger
from expense_tracker.db import base as db_base
from expense_tracker.db import models  # noqa: F401

logger = get_logger()
settings = get_settings()

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"https://.*\.vercel\.app",
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(routes_expenses.router)
app.include_router(routes_categories.router)
app.include_router(routes_health.router)


def _error_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    return JSONResponse(envelope.model_dump(exclude_none=True), status_code=status_code)


@app.exception_handler(ExpenseValidationError)
async def expense_validation_handler(request: Request, exc: ExpenseValidationError) -> JSONResponse:
    return _error_response(400, ErrorEnvelope(errors=exc.violations))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    violations = [
        {"field": str(error["loc"][-1]) if error.get("loc") else "body", "message": error["msg"]}
        for error in exc.errors()
    ]
    return _error_response(400, ErrorEnvelope(errors=violations))


@app.exception_handler(IdempotencyConflictError)
async def conflict_handler(request: Request, exc: IdempotencyConflictError) -> JSONResponse:
    return _error_response(409, ErrorEnvelope(message=str(exc)))


@app.exception_handler(StorageFaultError)
async def storage_fault_handler(request: Request, exc: StorageFaultError) -> JSONResponse:
    logger.error("Storage fault at path %s: %s", request.url.path, exc, exc_info=exc)
    return _error_response(500, ErrorEnvelope(message="Internal Server Error"))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error_response(exc.status_code, ErrorEnvelope(message=detail))


@app.on_event("startup")
def startup() -> None:
    # A store that cannot be reached is fatal: refuse to serve rather than run degraded.
    db_base.verify_store_connection()
    db_base.Base.metadata.create_all(bind=db_base.engine)
    db_base.ensure_runtime_schema()
    logger.info("Application started")
