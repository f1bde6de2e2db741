from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class MatchCategory(StrEnum):
    EMAIL = "email"
    PHONE = "phone"
    NAME = "name"


REASON_SAME_EMAIL = "same email address"
REASON_SAME_PHONE = "same phone number"
REASON_SAME_NAME = "same full name"
REASON_SIMILAR_NAME = "similar name"

# Customer table columns, in the order stores read and write them.
CUSTOMER_COLUMNS = (
    "id",
    "organization_id",
    "email",
    "first_name",
    "last_name",
    "phone",
    "total_bookings",
    "total_spent",
    "created_at",
)

BOOKING_COLUMNS = ("id", "customer_id", "organization_id", "total_amount", "created_at")

OVERRIDE_COLUMNS = {
    "email": "email",
    "phone": "phone",
    "first_name": "first_name",
    "last_name": "last_name",
}

AGGREGATE_COLUMNS = ("total_bookings", "total_spent")

UPDATABLE_COLUMNS = frozenset(OVERRIDE_COLUMNS.values()) | frozenset(AGGREGATE_COLUMNS)


def categories_for(reasons: Iterable[str]) -> set[MatchCategory]:
    """Bucket free-text match reasons into display categories."""
    found: set[MatchCategory] = set()
    for reason in reasons:
        text = reason.lower()
        for category in MatchCategory:
            if category.value in text:
                found.add(category)
    return found


def ordered_categories(categories: Iterable[MatchCategory]) -> list[MatchCategory]:
    present = set(categories)
    return [category for category in MatchCategory if category in present]
