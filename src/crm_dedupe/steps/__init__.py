from crm_dedupe.steps.cleanup import NormalizedCustomer, RecordNormalizer
from crm_dedupe.steps.clustering import GreedyDuplicateClusterer, stats_for
from crm_dedupe.steps.matching import CANDIDATE_THRESHOLD, MatchPolicy, WeightedCustomerMatcher
from crm_dedupe.steps.merge import MergeOrchestrator
from crm_dedupe.steps.similarity import levenshtein, name_similarity

__all__ = [
    "CANDIDATE_THRESHOLD",
    "GreedyDuplicateClusterer",
    "MatchPolicy",
    "MergeOrchestrator",
    "NormalizedCustomer",
    "RecordNormalizer",
    "WeightedCustomerMatcher",
    "levenshtein",
    "name_similarity",
    "stats_for",
]
