from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from enum import StrEnum

from crm_dedupe.models import DedupStats, DuplicateGroup, MergeRequest, MergeResult
from crm_dedupe.service import CustomerDedupService

logger = logging.getLogger(__name__)

SCAN_FAILED_MESSAGE = "Failed to scan for duplicates"
MERGE_FAILED_MESSAGE = "Failed to merge customers"
BUSY_MESSAGE = "Another dedupe operation is still running"


class SessionState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"
    MERGING = "merging"


class DedupSession:
    """Operator-facing state for one scan/review/merge session.

    Holds the current group list, stats and the last error. Groups dismissed
    with :meth:`dismiss_group` stay hidden for the rest of the session.
    """

    def __init__(
        self,
        service: CustomerDedupService,
        scope: str | None = None,
        listener: Callable[["DedupSession"], None] | None = None,
    ) -> None:
        self._service = service
        self._scope = scope
        self._listener = listener
        self._state = SessionState.IDLE
        self._groups: list[DuplicateGroup] = []
        self._stats: DedupStats | None = None
        self._dismissed: set[str] = set()
        self.error: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state is SessionState.SCANNING

    @property
    def is_merging(self) -> bool:
        return self._state is SessionState.MERGING

    @property
    def groups(self) -> list[DuplicateGroup]:
        return list(self._groups)

    @property
    def stats(self) -> DedupStats | None:
        return self._stats

    def get_group(self, primary_customer_id: str) -> DuplicateGroup | None:
        for group in self._groups:
            if group.primary_customer_id == primary_customer_id:
                return group
        return None

    def scan_for_duplicates(self, scope: str | None = None) -> list[DuplicateGroup]:
        if self._state is not SessionState.IDLE:
            logger.warning("Scan refused while session is %s", self._state)
            return self.groups

        if scope is not None:
            self._scope = scope
        self.error = None
        self._transition(SessionState.SCANNING)
        try:
            groups, stats = self._service.scan(self._scope)
        except Exception:
            logger.exception("Duplicate scan failed for scope %s", self._scope or "<all>")
            self._groups = []
            self.error = SCAN_FAILED_MESSAGE
        else:
            self._groups = [g for g in groups if g.primary_customer_id not in self._dismissed]
            self._stats = stats
        finally:
            self._transition(SessionState.IDLE)
        return self.groups

    def merge_customers(self, request: MergeRequest) -> MergeResult:
        if self._state is not SessionState.IDLE:
            logger.warning("Merge into %s refused while session is %s", request.primary_customer_id, self._state)
            return MergeResult(success=False, merged_customer_id=request.primary_customer_id, error=BUSY_MESSAGE)

        self.error = None
        self._transition(SessionState.MERGING)
        try:
            result = self._service.merge_customers(request)
            if result.success:
                self._drop_group(request.primary_customer_id, result)
            else:
                self.error = result.error or MERGE_FAILED_MESSAGE
        finally:
            self._transition(SessionState.IDLE)
        return result

    def dismiss_group(self, primary_customer_id: str) -> None:
        """Hide a group judged a false positive; nothing is written to the store."""
        self._dismissed.add(primary_customer_id)
        self._groups = [g for g in self._groups if g.primary_customer_id != primary_customer_id]

    def _drop_group(self, primary_customer_id: str, result: MergeResult) -> None:
        group = self.get_group(primary_customer_id)
        if group is None:
            return
        self._groups.remove(group)
        if self._stats is not None:
            self._stats = replace(
                self._stats,
                total_customers=max(0, self._stats.total_customers - result.duplicates_removed),
                potential_duplicates=max(0, self._stats.potential_duplicates - len(group.duplicates)),
                duplicate_groups=max(0, self._stats.duplicate_groups - 1),
            )

    def _transition(self, state: SessionState) -> None:
        self._state = state
        if self._listener is not None:
            self._listener(self)
