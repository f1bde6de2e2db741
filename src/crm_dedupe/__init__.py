"""Customer duplicate detection and merging for the booking back office."""

from crm_dedupe.models import (
    CustomerRecord,
    DedupStats,
    DuplicateCandidate,
    DuplicateGroup,
    FieldOverrides,
    MatchResult,
    MergeRequest,
    MergeResult,
)
from crm_dedupe.schema import MatchCategory
from crm_dedupe.service import CustomerDedupService
from crm_dedupe.session import DedupSession, SessionState

__all__ = [
    "CustomerDedupService",
    "CustomerRecord",
    "DedupSession",
    "DedupStats",
    "DuplicateCandidate",
    "DuplicateGroup",
    "FieldOverrides",
    "MatchCategory",
    "MatchResult",
    "MergeRequest",
    "MergeResult",
    "SessionState",
]
