from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from crm_dedupe.models import CustomerRecord, DuplicateGroup, MatchResult


class CustomerStore(Protocol):
    """Persistence collaborator: the only remote surface the dedupe core touches.

    Implementations raise ``StoreError`` on failure. Every mutation stands on
    its own; callers get no transaction spanning several calls.
    """

    def list_customers(self, scope: str | None = None) -> list[CustomerRecord]:
        """Customers in ``scope`` (an organization id, or all when ``None``) in natural order."""
        ...

    def count_customers(self, scope: str | None = None) -> int:
        ...

    def reassign_bookings(self, from_customer_id: str, to_customer_id: str) -> int:
        """Point every booking of ``from_customer_id`` at ``to_customer_id``; return rows moved."""
        ...

    def update_customer(self, customer_id: str, fields: Mapping[str, object]) -> None:
        ...

    def booking_amounts(self, customer_id: str) -> list[float]:
        ...

    def delete_customers(self, customer_ids: Sequence[str]) -> int:
        ...


class PairwiseMatcher(Protocol):
    """Score two customer records against each other."""

    threshold: int

    def score(self, source: CustomerRecord, candidate: CustomerRecord) -> MatchResult:
        ...

    def is_candidate(self, result: MatchResult) -> bool:
        ...


class DuplicateClusterer(Protocol):
    """Turn a scope's customer list into disjoint duplicate groups."""

    def cluster(self, records: Sequence[CustomerRecord]) -> list[DuplicateGroup]:
        ...
