from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from crm_dedupe.interfaces import PairwiseMatcher
from crm_dedupe.models import CustomerRecord, DedupStats, DuplicateCandidate, DuplicateGroup
from crm_dedupe.schema import MatchCategory, categories_for, ordered_categories
from crm_dedupe.steps.matching import WeightedCustomerMatcher

logger = logging.getLogger(__name__)

PRIMARY_ORDERS = ("scan", "created_at")


class GreedyDuplicateClusterer:
    """Single-pass greedy grouping over every unordered pair of records.

    Each record that has not yet been placed in a group is compared with all
    other unplaced records; if any score at or above the matcher threshold it
    becomes the primary of a new group holding those candidates. Candidates of
    candidates are not followed, so which record ends up primary depends only
    on the iteration order. Comparisons are O(n^2) with no blocking.
    """

    def __init__(self, matcher: PairwiseMatcher | None = None, primary_order: str = "scan") -> None:
        if primary_order not in PRIMARY_ORDERS:
            raise ValueError(f"unknown primary_order {primary_order!r}")
        self._matcher = matcher or WeightedCustomerMatcher()
        self._primary_order = primary_order

    def cluster(self, records: Sequence[CustomerRecord]) -> list[DuplicateGroup]:
        ordered = self._ordered(records)
        processed: set[str] = set()
        groups: list[DuplicateGroup] = []

        for record in ordered:
            if record.customer_id in processed:
                continue

            candidates = self._candidates_for(record, ordered, processed)
            if not candidates:
                continue

            processed.add(record.customer_id)
            processed.update(candidate.customer_id for candidate in candidates)
            group = DuplicateGroup(
                primary_customer_id=record.customer_id,
                duplicates=candidates,
                matched_on=_matched_on(candidates),
            )
            logger.debug(
                "Group %s: %d candidate(s) matched on %s",
                group.primary_customer_id,
                len(candidates),
                ",".join(group.matched_on),
            )
            groups.append(group)

        logger.info("Found %d duplicate group(s) among %d customer(s)", len(groups), len(records))
        return groups

    def _ordered(self, records: Sequence[CustomerRecord]) -> list[CustomerRecord]:
        if self._primary_order == "created_at":
            # Oldest first; undated records keep scan order after the dated ones.
            return sorted(records, key=lambda r: (r.created_at is None, r.created_at or ""))
        return list(records)

    def _candidates_for(
        self,
        record: CustomerRecord,
        records: Sequence[CustomerRecord],
        processed: set[str],
    ) -> list[DuplicateCandidate]:
        candidates: list[DuplicateCandidate] = []
        for other in records:
            if other.customer_id == record.customer_id or other.customer_id in processed:
                continue
            match = self._matcher.score(record, other)
            if self._matcher.is_candidate(match):
                candidates.append(DuplicateCandidate.from_match(other, match))
        # sorted() is stable, so equal scores keep scan order.
        return sorted(candidates, key=lambda c: c.match_score, reverse=True)


def _matched_on(candidates: Sequence[DuplicateCandidate]) -> list[MatchCategory]:
    found: set[MatchCategory] = set()
    for candidate in candidates:
        found |= categories_for(candidate.match_reasons)
    return ordered_categories(found)


def stats_for(
    total_customers: int,
    groups: Sequence[DuplicateGroup],
    scanned_at: datetime | None = None,
) -> DedupStats:
    return DedupStats(
        total_customers=total_customers,
        potential_duplicates=sum(len(group.duplicates) for group in groups),
        duplicate_groups=len(groups),
        last_scan_at=scanned_at or datetime.now(timezone.utc),
    )
