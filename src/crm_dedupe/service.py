from __future__ import annotations

import logging

from crm_dedupe.config import Settings
from crm_dedupe.interfaces import CustomerStore, DuplicateClusterer
from crm_dedupe.models import DedupStats, DuplicateGroup, MergeRequest, MergeResult
from crm_dedupe.steps.clustering import GreedyDuplicateClusterer, stats_for
from crm_dedupe.steps.matching import MatchPolicy, WeightedCustomerMatcher
from crm_dedupe.steps.merge import MergeOrchestrator

logger = logging.getLogger(__name__)


class CustomerDedupService:
    """Scan a scope for duplicate customers and merge them on request.

    Nothing is cached between calls: every scan lists the scope afresh, so a
    rescan after a merge reflects the updated customer table.
    """

    def __init__(
        self,
        store: CustomerStore,
        clusterer: DuplicateClusterer | None = None,
        orchestrator: MergeOrchestrator | None = None,
    ) -> None:
        self._store = store
        self._clusterer = clusterer or GreedyDuplicateClusterer()
        self._orchestrator = orchestrator or MergeOrchestrator(store)

    @classmethod
    def from_settings(cls, store: CustomerStore, settings: Settings) -> "CustomerDedupService":
        matcher = WeightedCustomerMatcher(policy=MatchPolicy.from_settings(settings.matching))
        clusterer = GreedyDuplicateClusterer(
            matcher=matcher,
            primary_order=settings.clustering.primary_order,
        )
        return cls(store, clusterer=clusterer)

    def find_duplicates(self, scope: str | None = None) -> list[DuplicateGroup]:
        groups, _ = self.scan(scope)
        return groups

    def scan(self, scope: str | None = None) -> tuple[list[DuplicateGroup], DedupStats]:
        """Group duplicates and derive stats from a single listing of the scope."""
        records = self._store.list_customers(scope)
        logger.info("Scanning %d customer(s) in scope %s", len(records), scope or "<all>")
        groups = self._clusterer.cluster(records)
        return groups, stats_for(len(records), groups)

    def get_stats(self, scope: str | None = None) -> DedupStats:
        total = self._store.count_customers(scope)
        groups = self.find_duplicates(scope)
        return stats_for(total, groups)

    def merge_customers(self, request: MergeRequest) -> MergeResult:
        return self._orchestrator.merge(request)
