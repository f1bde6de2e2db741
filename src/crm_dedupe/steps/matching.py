from __future__ import annotations

import logging
from dataclasses import dataclass

from crm_dedupe.config import MatchingSettings
from crm_dedupe.models import CustomerRecord, MatchResult
from crm_dedupe.schema import (
    REASON_SAME_EMAIL,
    REASON_SAME_NAME,
    REASON_SAME_PHONE,
    REASON_SIMILAR_NAME,
)
from crm_dedupe.steps.cleanup import NormalizedCustomer, RecordNormalizer
from crm_dedupe.steps.similarity import name_similarity

logger = logging.getLogger(__name__)

# Minimum score for a pair to be reported as a duplicate candidate. A shared
# email or phone clears it on its own; name similarity alone never does.
CANDIDATE_THRESHOLD = 70


@dataclass(frozen=True, slots=True)
class MatchPolicy:
    """Additive weights and cut-offs used to score a customer pair."""

    email_weight: int = 100
    phone_weight: int = 80
    exact_name_weight: int = 60
    similar_name_weight: int = 40
    similar_name_ratio: float = 0.8
    min_phone_digits: int = 10
    min_exact_name_length: int = 4
    max_score: int = 100
    candidate_threshold: int = CANDIDATE_THRESHOLD

    @classmethod
    def from_settings(cls, settings: MatchingSettings) -> "MatchPolicy":
        return cls(**settings.model_dump())


class WeightedCustomerMatcher:
    """Heuristic matcher over email, phone and name signals."""

    def __init__(
        self,
        policy: MatchPolicy | None = None,
        normalizer: RecordNormalizer | None = None,
    ) -> None:
        self._policy = policy or MatchPolicy()
        self._normalizer = normalizer or RecordNormalizer()

    @property
    def policy(self) -> MatchPolicy:
        return self._policy

    @property
    def threshold(self) -> int:
        return self._policy.candidate_threshold

    def score(self, source: CustomerRecord, candidate: CustomerRecord) -> MatchResult:
        left = self._normalizer.normalize(source)
        right = self._normalizer.normalize(candidate)
        score, reasons = self._score_normalized(left, right)
        return MatchResult(
            source_id=source.customer_id,
            candidate_id=candidate.customer_id,
            score=score,
            reasons=reasons,
        )

    def is_candidate(self, result: MatchResult) -> bool:
        return result.score >= self._policy.candidate_threshold

    def _score_normalized(self, left: NormalizedCustomer, right: NormalizedCustomer) -> tuple[int, list[str]]:
        policy = self._policy
        score = 0
        reasons: list[str] = []

        if left.email and left.email == right.email:
            score += policy.email_weight
            reasons.append(REASON_SAME_EMAIL)

        if (
            left.phone_digits
            and left.phone_digits == right.phone_digits
            and len(left.phone_digits) >= policy.min_phone_digits
        ):
            score += policy.phone_weight
            reasons.append(REASON_SAME_PHONE)

        # Only one name bonus applies per pair.
        if left.full_name and right.full_name:
            if left.full_name == right.full_name and len(left.full_name) >= policy.min_exact_name_length:
                score += policy.exact_name_weight
                reasons.append(REASON_SAME_NAME)
            elif name_similarity(left.full_name, right.full_name) > policy.similar_name_ratio:
                score += policy.similar_name_weight
                reasons.append(REASON_SIMILAR_NAME)

        score = min(score, policy.max_score)
        if score:
            logger.debug("Scored %s vs %s: %d (%s)", left.customer_id, right.customer_id, score, ", ".join(reasons))
        return score, reasons
