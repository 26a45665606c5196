"""Deterministic ranking of scored contractors.

Strategies are sort keys looked up by name. Every key ends with the contractor id so the
resulting order is total and independent of input order.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterable
from types import MappingProxyType
from typing import TypeAlias

from ..observability import get_logger
from .models import RankedEntry, ScoredContractor

DEFAULT_ALGORITHM = "default"

SortKey: TypeAlias = "Callable[[ScoredContractor], tuple[float, float, str]]"


class UnknownRankingAlgorithmWarning(UserWarning):
    """Emitted when a ranking algorithm name is not registered."""

    def __init__(self, algorithm: str) -> None:
        self.algorithm = algorithm
        super().__init__(
            f"Unknown ranking algorithm '{algorithm}'; falling back to '{DEFAULT_ALGORITHM}'."
        )


def _by_overall(item: ScoredContractor) -> tuple[float, float, str]:
    return (-item.result.overall_score, -item.result.performance_score, item.contractor_id)


def _by_performance(item: ScoredContractor) -> tuple[float, float, str]:
    return (-item.result.performance_score, -item.result.overall_score, item.contractor_id)


RANKING_STRATEGIES: MappingProxyType[str, SortKey] = MappingProxyType(
    {
        DEFAULT_ALGORITHM: _by_overall,
        "performance": _by_performance,
    }
)


def available_algorithms() -> tuple[str, ...]:
    return tuple(sorted(RANKING_STRATEGIES))


def resolve_algorithm(algorithm: str | None) -> str:
    """Return a registered algorithm name, falling back to the default with a warning."""
    name = (algorithm or DEFAULT_ALGORITHM).strip().lower()
    if name in RANKING_STRATEGIES:
        return name
    get_logger("eventpros_matching.ranking").warning(
        "Unknown ranking algorithm %r; using %r", algorithm, DEFAULT_ALGORITHM
    )
    warnings.warn(UnknownRankingAlgorithmWarning(str(algorithm)), stacklevel=3)
    return DEFAULT_ALGORITHM


def rank(
    scored: Iterable[ScoredContractor],
    algorithm: str = DEFAULT_ALGORITHM,
) -> list[RankedEntry]:
    """Order scored contractors and assign 1-based ranks.

    No threshold filtering happens here; callers filter before or after ranking.
    """
    sort_key = RANKING_STRATEGIES[resolve_algorithm(algorithm)]
    ordered = sorted(scored, key=sort_key)
    return [
        RankedEntry(
            contractor_id=item.contractor_id,
            overall_score=item.result.overall_score,
            rank=position,
        )
        for position, item in enumerate(ordered, start=1)
    ]
