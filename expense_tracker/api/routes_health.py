from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from expense_tracker.core.errors import StorageUnavailableError
from expense_tracker.core.logging import get_logger
from expense_tracker.db import base as db_base

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger()


@router.get("")
def health() -> JSONResponse:
    timestamp = datetime.now(UTC).isoformat()
    try:
        db_base.verify_store_connection()
    except StorageUnavailableError as exc:
        logger.warning("Health check failed: %s", exc)
        return JSONResponse({"status": "unavailable", "timestamp": timestamp}, status_code=503)
    return JSONResponse({"status": "ok", "timestamp": timestamp})
