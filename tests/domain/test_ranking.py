"""Tests for deterministic ranking."""

from __future__ import annotations

import random

import pytest

from eventpros_matching.domain.ranking import (
    RANKING_STRATEGIES,
    UnknownRankingAlgorithmWarning,
    available_algorithms,
    rank,
    resolve_algorithm,
)
from tests.support.records import make_scored


def test_rank_orders_by_overall_descending() -> None:
    scored = [
        make_scored("con-low", 0.2),
        make_scored("con-high", 0.9),
        make_scored("con-mid", 0.5),
    ]

    ranked = rank(scored)

    assert [entry.contractor_id for entry in ranked] == ["con-high", "con-mid", "con-low"]
    assert [entry.rank for entry in ranked] == [1, 2, 3]
    assert ranked[0].overall_score == 0.9


def test_rank_breaks_ties_by_performance_then_id() -> None:
    scored = [
        make_scored("b", 0.7, performance=0.8),
        make_scored("c", 0.7, performance=0.9),
        make_scored("a", 0.7, performance=0.8),
    ]

    ranked = rank(scored)

    assert [entry.contractor_id for entry in ranked] == ["c", "a", "b"]


def test_rank_is_independent_of_input_order() -> None:
    scored = [
        make_scored(f"con-{index:02d}", overall=(index % 4) / 4, performance=(index % 3) / 3)
        for index in range(24)
    ]
    expected = rank(scored)
    shuffled = list(scored)
    random.Random(7).shuffle(shuffled)

    assert rank(shuffled) == expected


def test_rank_does_not_filter_low_scores() -> None:
    ranked = rank([make_scored("zero", 0.0), make_scored("one", 1.0)])

    assert len(ranked) == 2


def test_rank_empty_input() -> None:
    assert rank([]) == []


def test_performance_strategy_orders_by_performance_first() -> None:
    scored = [
        make_scored("steady", 0.9, performance=0.4),
        make_scored("star", 0.6, performance=1.0),
    ]

    ranked = rank(scored, "performance")

    assert [entry.contractor_id for entry in ranked] == ["star", "steady"]


def test_unknown_algorithm_falls_back_with_warning() -> None:
    scored = [make_scored("b", 0.5), make_scored("a", 0.9)]

    with pytest.warns(UnknownRankingAlgorithmWarning) as record:
        ranked = rank(scored, "popularity")

    assert [entry.contractor_id for entry in ranked] == ["a", "b"]
    warning = record[0].message
    assert isinstance(warning, UnknownRankingAlgorithmWarning)
    assert warning.algorithm == "popularity"


def test_resolve_algorithm_normalises_case() -> None:
    assert resolve_algorithm(" Performance ") == "performance"
    assert resolve_algorithm(None) == "default"


def test_registry_exposes_default_strategy() -> None:
    assert "default" in RANKING_STRATEGIES
    assert available_algorithms() == ("default", "performance")
