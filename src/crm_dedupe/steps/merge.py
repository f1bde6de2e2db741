from __future__ import annotations

import logging

from crm_dedupe.errors import StoreError
from crm_dedupe.interfaces import CustomerStore
from crm_dedupe.models import MergeRequest, MergeResult

logger = logging.getLogger(__name__)


class MergeOrchestrator:
    """Fold duplicate customers into a primary record.

    Steps run strictly in order: move bookings, apply overrides, recompute the
    primary's aggregates from its bookings, delete the duplicates. Each store
    call commits on its own and nothing is rolled back, so a failure after the
    first step leaves already-moved bookings on the primary.
    """

    def __init__(self, store: CustomerStore) -> None:
        self._store = store

    def merge(self, request: MergeRequest) -> MergeResult:
        primary_id = request.primary_customer_id
        bookings_moved = 0
        try:
            for duplicate_id in request.duplicate_customer_ids:
                moved = self._store.reassign_bookings(duplicate_id, primary_id)
                logger.debug("Moved %d booking(s) from %s to %s", moved, duplicate_id, primary_id)
                bookings_moved += moved

            if request.overrides is not None:
                update = request.overrides.as_update()
                if update:
                    self._store.update_customer(primary_id, update)

            self._recompute_aggregates(primary_id)

            try:
                removed = self._store.delete_customers(request.duplicate_customer_ids)
            except StoreError as exc:
                raise StoreError(f"Failed to delete duplicates: {exc}") from exc
        except Exception as exc:
            logger.exception("Merge into %s failed after moving %d booking(s)", primary_id, bookings_moved)
            return MergeResult(
                success=False,
                merged_customer_id=primary_id,
                bookings_moved=bookings_moved,
                duplicates_removed=0,
                error=str(exc) or type(exc).__name__,
            )

        logger.info(
            "Merged %d duplicate(s) into %s, moved %d booking(s)",
            removed,
            primary_id,
            bookings_moved,
        )
        return MergeResult(
            success=True,
            merged_customer_id=primary_id,
            bookings_moved=bookings_moved,
            duplicates_removed=removed,
        )

    def _recompute_aggregates(self, customer_id: str) -> None:
        amounts = self._store.booking_amounts(customer_id)
        total_spent = round(sum(amount or 0.0 for amount in amounts), 2)
        self._store.update_customer(
            customer_id,
            {"total_bookings": len(amounts), "total_spent": total_spent},
        )
