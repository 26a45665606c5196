"""Pure scoring and ranking domain."""

from .compatibility import BatchScores, ScoringFailure, ScoringSettings, score, score_batch
from .ranking import RANKING_STRATEGIES, UnknownRankingAlgorithmWarning, rank
from .weights import DEFAULT_WEIGHTS, WeightConfig, normalise_weights

__all__ = [
    "DEFAULT_WEIGHTS",
    "RANKING_STRATEGIES",
    "BatchScores",
    "ScoringFailure",
    "ScoringSettings",
    "UnknownRankingAlgorithmWarning",
    "WeightConfig",
    "normalise_weights",
    "rank",
    "score",
    "score_batch",
]
