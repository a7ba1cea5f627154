from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    UTILITIES = "Utilities"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"


# Shared by validation, the /categories route and the client form.
CATEGORIES: tuple[str, ...] = tuple(category.value for category in Category)


class SortOrder(StrEnum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"


class CreateOutcome(StrEnum):
    CREATED = "created"
    ALREADY_EXISTED = "already_existed"
