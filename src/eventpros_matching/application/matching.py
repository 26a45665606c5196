"""Find matches: filter, score, rank, threshold and paginate contractors for one event.

Everything here works on records already in memory; fetching events and contractors and
persisting analytics belong to the host application.

Usage example:
    from eventpros_matching.application.matching import MatchingRequest, find_matches

    response = find_matches(event, contractors, MatchingRequest(page=1, limit=10))
    for match in response.matches:
        print(match.rank, match.contractor_id, match.result.overall_score)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..domain.compatibility import ScoringFailure, ScoringSettings, score_batch
from ..domain.models import CompatibilityResult, ContractorProfile, EventRequirements
from ..domain.ranking import DEFAULT_ALGORITHM, rank, resolve_algorithm
from ..domain.reasons import match_reasons
from ..domain.weights import WeightConfig
from ..exceptions import InvalidPaginationError
from ..observability import get_logger

DEFAULT_PAGE_LIMIT = 20


@dataclass(frozen=True)
class MatchingFilters:
    """Pre-scoring contractor filters plus a post-ranking score threshold."""

    service_types: tuple[str, ...] = field(default_factory=tuple)
    verified_only: bool = False
    premium_only: bool = False
    min_score: float = 0.0


@dataclass(frozen=True)
class MatchingRequest:
    """Options for one find-matches call."""

    filters: MatchingFilters = field(default_factory=MatchingFilters)
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    algorithm: str = DEFAULT_ALGORITHM


@dataclass(frozen=True)
class ContractorMatch:
    """A ranked contractor with its score breakdown and explanation."""

    contractor_id: str
    company_name: str
    rank: int
    is_premium: bool
    result: CompatibilityResult
    match_reasons: tuple[str, ...]


@dataclass(frozen=True)
class MatchingAnalytics:
    """Summary statistics for one find-matches call."""

    event_id: str
    matching_algorithm: str
    total_contractors: int
    matching_contractors: int
    premium_contractors: int
    average_score: float


@dataclass(frozen=True)
class MatchingResponse:
    """One page of matches plus totals, analytics and per-contractor failures."""

    matches: tuple[ContractorMatch, ...]
    total: int
    page: int
    limit: int
    analytics: MatchingAnalytics
    failures: tuple[ScoringFailure, ...]


def _passes_filters(contractor: ContractorProfile, filters: MatchingFilters) -> bool:
    if filters.verified_only and not contractor.is_verified:
        return False
    if filters.premium_only and not contractor.is_premium:
        return False
    if filters.service_types:
        wanted = {value.strip().lower() for value in filters.service_types if value.strip()}
        offered = {value.strip().lower() for value in contractor.service_categories}
        if wanted and not wanted & offered:
            return False
    return True


def _latest_by_id(
    positioned: Sequence[tuple[int, ContractorProfile]],
) -> list[tuple[int, ContractorProfile]]:
    """Keep the last occurrence of each contractor id, in input order, with its position."""
    latest: dict[str, tuple[int, ContractorProfile]] = {}
    unidentified: list[tuple[int, ContractorProfile]] = []
    for position, contractor in positioned:
        if isinstance(contractor.contractor_id, str) and contractor.contractor_id.strip():
            latest[contractor.contractor_id] = (position, contractor)
        else:
            unidentified.append((position, contractor))
    return sorted([*latest.values(), *unidentified], key=lambda item: item[0])


def build_analytics(
    event_id: str,
    algorithm: str,
    total_contractors: int,
    matches: Sequence[ContractorMatch],
) -> MatchingAnalytics:
    """Summarise a full (unpaginated) match list."""
    average = (
        sum(match.result.overall_score for match in matches) / len(matches) if matches else 0.0
    )
    return MatchingAnalytics(
        event_id=event_id,
        matching_algorithm=algorithm,
        total_contractors=total_contractors,
        matching_contractors=len(matches),
        premium_contractors=sum(1 for match in matches if match.is_premium),
        average_score=average,
    )


def find_matches(
    event: EventRequirements,
    contractors: Sequence[ContractorProfile],
    request: MatchingRequest | None = None,
    weights: WeightConfig | None = None,
    settings: ScoringSettings | None = None,
) -> MatchingResponse:
    """Rank ``contractors`` for ``event`` and return the requested page.

    Raises:
        InvalidPaginationError: If ``page`` or ``limit`` is below 1.
        ValidationError: If the event has no ``event_id``.
    """
    request = request or MatchingRequest()
    if request.page < 1 or request.limit < 1:
        raise InvalidPaginationError(request.page, request.limit)

    logger = get_logger("eventpros_matching.matching")
    algorithm = resolve_algorithm(request.algorithm)
    positioned = _latest_by_id(
        [
            (position, contractor)
            for position, contractor in enumerate(contractors)
            if _passes_filters(contractor, request.filters)
        ]
    )
    candidates = [contractor for _, contractor in positioned]
    logger.info(
        "Scoring %s of %s contractors for event %s",
        len(candidates),
        len(contractors),
        event.event_id,
    )

    batch = score_batch(event, candidates, weights=weights, settings=settings)
    # Failure indices point into the caller's sequence, not the filtered candidates.
    failures = tuple(
        replace(failure, index=positioned[failure.index][0]) for failure in batch.failures
    )
    for failure in failures:
        logger.warning("Skipped contractor at index %s: %s", failure.index, failure.error)

    by_id = {c.contractor_id: c for c in candidates}
    results = {item.contractor_id: item.result for item in batch.scored}
    matches: list[ContractorMatch] = []
    for entry in rank(batch.scored, algorithm):
        if entry.overall_score < request.filters.min_score:
            continue
        contractor = by_id[entry.contractor_id]
        result = results[entry.contractor_id]
        matches.append(
            ContractorMatch(
                contractor_id=entry.contractor_id,
                company_name=contractor.company_name,
                rank=entry.rank,
                is_premium=contractor.is_premium,
                result=result,
                match_reasons=match_reasons(result, contractor.is_premium),
            )
        )

    offset = (request.page - 1) * request.limit
    return MatchingResponse(
        matches=tuple(matches[offset : offset + request.limit]),
        total=len(matches),
        page=request.page,
        limit=request.limit,
        analytics=build_analytics(event.event_id, algorithm, len(contractors), matches),
        failures=failures,
    )
