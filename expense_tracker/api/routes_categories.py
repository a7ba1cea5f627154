from __future__ import annotations

from fastapi import APIRouter

from expense_tracker.api.schemas import CategoryListEnvelope
from expense_tracker.domain.enums import CATEGORIES

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoryListEnvelope)
def get_categories() -> CategoryListEnvelope:
    return CategoryListEnvelope(data=list(CATEGORIES))
