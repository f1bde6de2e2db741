from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from crm_dedupe.schema import MatchCategory, OVERRIDE_COLUMNS, categories_for


@dataclass(slots=True)
class CustomerRecord:
    """Customer row as read from the persistence layer."""

    customer_id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    total_bookings: int = 0
    total_spent: float = 0.0
    created_at: str | None = None
    organization_id: str | None = None

    @property
    def full_name(self) -> str:
        parts = [(self.first_name or "").strip(), (self.last_name or "").strip()]
        return " ".join(part for part in parts if part)


@dataclass(slots=True)
class BookingRecord:
    booking_id: str
    customer_id: str
    total_amount: float = 0.0
    organization_id: str | None = None
    created_at: str | None = None


@dataclass(slots=True)
class MatchResult:
    """Score and reasons for one (source, candidate) pair."""

    source_id: str
    candidate_id: str
    score: int
    reasons: list[str] = field(default_factory=list)

    @property
    def categories(self) -> set[MatchCategory]:
        return categories_for(self.reasons)


@dataclass(slots=True)
class DuplicateCandidate:
    customer_id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    total_bookings: int
    total_spent: float
    created_at: str | None
    match_score: int
    match_reasons: list[str]

    @classmethod
    def from_match(cls, record: CustomerRecord, match: MatchResult) -> "DuplicateCandidate":
        return cls(
            customer_id=record.customer_id,
            email=record.email,
            first_name=record.first_name,
            last_name=record.last_name,
            phone=record.phone,
            total_bookings=record.total_bookings or 0,
            total_spent=record.total_spent or 0.0,
            created_at=record.created_at,
            match_score=match.score,
            match_reasons=list(match.reasons),
        )


@dataclass(slots=True)
class DuplicateGroup:
    """A primary record and the records judged to duplicate it."""

    primary_customer_id: str
    duplicates: list[DuplicateCandidate]
    matched_on: list[MatchCategory] = field(default_factory=list)

    @property
    def customer_ids(self) -> list[str]:
        return [self.primary_customer_id, *(d.customer_id for d in self.duplicates)]


@dataclass(slots=True)
class FieldOverrides:
    """Values to write onto the primary record once a merge has moved bookings."""

    email: str | None = None
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    def as_update(self) -> dict[str, str]:
        update: dict[str, str] = {}
        for attr, column in OVERRIDE_COLUMNS.items():
            value = getattr(self, attr)
            if value:
                update[column] = value
        return update


@dataclass(slots=True)
class MergeRequest:
    primary_customer_id: str
    duplicate_customer_ids: list[str]
    overrides: FieldOverrides | None = None

    def __post_init__(self) -> None:
        if not self.duplicate_customer_ids:
            raise ValueError("merge request needs at least one duplicate id")
        if self.primary_customer_id in self.duplicate_customer_ids:
            raise ValueError(f"primary {self.primary_customer_id!r} is listed as its own duplicate")


@dataclass(slots=True)
class MergeResult:
    success: bool
    merged_customer_id: str
    bookings_moved: int = 0
    duplicates_removed: int = 0
    error: str | None = None


@dataclass(slots=True)
class DedupStats:
    total_customers: int
    potential_duplicates: int
    duplicate_groups: int
    last_scan_at: datetime
