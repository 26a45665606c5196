"""Compatibility scoring between one event and one contractor.

Each factor is computed independently from the inputs it needs, so a missing field only
affects its own factor. Every factor returns a value in 0.0–1.0.

Usage example:
    from eventpros_matching.domain.compatibility import score
    from eventpros_matching.domain.models import ContractorProfile, EventRequirements

    event = EventRequirements(event_id="evt-1", service_requirements=("catering",))
    contractor = ContractorProfile(
        contractor_id="con-1",
        service_categories=frozenset({"catering", "bar service"}),
        availability="flexible",
    )
    result = score(event, contractor)
    assert result.service_type_score == 1.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from ..exceptions import ValidationError
from .geo import haversine_km, is_valid_location, linear_decay
from .models import (
    CompatibilityResult,
    ContractorProfile,
    EventRequirements,
    PricingRange,
    ScoredContractor,
)
from .service_areas import ServiceArea, nearest_service_area_distance
from .weights import WeightConfig, normalise_weights

MAX_RATING = 5.0

# Experience blend (rating-weighted)
EXPERIENCE_REVIEW_WEIGHT = 0.4
EXPERIENCE_RATING_WEIGHT = 0.6
DEFAULT_REFERENCE_REVIEW_COUNT = 20
UNPROVEN_EXPERIENCE_SCORE = 0.3

# Pricing
OVER_BUDGET_CEILING = 0.1
UNKNOWN_PRICING_SCORE = 0.5

# Location
DEFAULT_MAX_SERVICE_RADIUS_KM = 100.0
UNKNOWN_LOCATION_SCORE = 0.5

# Performance
VERIFIED_BONUS = 0.2
TIER_BONUSES = MappingProxyType(
    {
        "essential": 0.0,
        "showcase": 0.1,
        "spotlight": 0.2,
    }
)

# Availability (placeholder until calendar data is available)
AVAILABILITY_SCORES = MappingProxyType(
    {
        "flexible": 1.0,
        "weekends": 0.7,
        "weekdays": 0.7,
        "limited": 0.4,
        "unavailable": 0.0,
    }
)
UNKNOWN_AVAILABILITY_SCORE = 0.5


@dataclass(frozen=True)
class ScoringSettings:
    """Tunable constants for factor scoring."""

    reference_review_count: int = DEFAULT_REFERENCE_REVIEW_COUNT
    max_service_radius_km: float = DEFAULT_MAX_SERVICE_RADIUS_KM
    service_areas: tuple[ServiceArea, ...] = field(default_factory=tuple)


DEFAULT_SETTINGS = ScoringSettings()


@dataclass(frozen=True)
class ScoringFailure:
    """A contractor that could not be scored, with its position in the batch."""

    index: int
    contractor_id: str
    error: ValidationError


@dataclass(frozen=True)
class BatchScores:
    """Outcome of scoring many contractors against one event."""

    scored: tuple[ScoredContractor, ...]
    failures: tuple[ScoringFailure, ...]


def _clamp(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def _finite(value: float | int | None) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _normalise_categories(values: Iterable[str]) -> frozenset[str]:
    return frozenset(text for text in (value.strip().lower() for value in values) if text)


def _require_identifier(value: object, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field_name)
    return value


def score_service_type(requirements: Sequence[str], categories: Iterable[str]) -> float:
    """Share of required service categories the contractor offers.

    An event that expresses no requirements is a full match.
    """
    required = _normalise_categories(requirements)
    if not required:
        return 1.0
    offered = _normalise_categories(categories)
    return len(required & offered) / max(1, len(required))


def score_experience(
    average_rating: float | None,
    review_count: int | None,
    reference_review_count: int = DEFAULT_REFERENCE_REVIEW_COUNT,
) -> float:
    """Blend review volume and rating; unreviewed contractors get a neutral-low score."""
    reviews = _finite(review_count)
    if reviews is None or reviews <= 0:
        return UNPROVEN_EXPERIENCE_SCORE
    rating = _finite(average_rating) or 0.0
    reference = max(1, reference_review_count)
    volume = min(1.0, reviews / reference)
    return _clamp(
        EXPERIENCE_REVIEW_WEIGHT * volume + EXPERIENCE_RATING_WEIGHT * _clamp(rating / MAX_RATING)
    )


def score_pricing(budget_total: float | None, pricing_range: PricingRange | None) -> float:
    """Score how well the contractor's price band fits the event budget.

    - Whole band within budget: 1.0.
    - Band minimum above budget: below ``OVER_BUDGET_CEILING``, shrinking as the gap grows.
    - Budget inside the band: rises linearly from the ceiling to 1.0 across the band.
    """
    budget = _finite(budget_total)
    if budget is None or budget <= 0.0 or pricing_range is None:
        return UNKNOWN_PRICING_SCORE

    low = _finite(pricing_range.min)
    high = _finite(pricing_range.max)
    if low is None or high is None or low < 0.0 or high < low:
        return UNKNOWN_PRICING_SCORE

    if high <= budget:
        return 1.0
    if low > budget:
        return _clamp(OVER_BUDGET_CEILING * budget / low)
    # low <= budget < high, so the band has non-zero width here
    covered = (budget - low) / (high - low)
    return _clamp(OVER_BUDGET_CEILING + (1.0 - OVER_BUDGET_CEILING) * covered)


def score_location(
    event: EventRequirements,
    contractor: ContractorProfile,
    settings: ScoringSettings = DEFAULT_SETTINGS,
) -> float:
    """Linear distance decay from the event to the contractor's nearest known point."""
    if event.location is None or not is_valid_location(event.location):
        return UNKNOWN_LOCATION_SCORE

    distance: float | None
    if contractor.location is not None and is_valid_location(contractor.location):
        distance = haversine_km(event.location, contractor.location)
    else:
        distance = nearest_service_area_distance(
            event.location, contractor.service_areas, settings.service_areas
        )
    if distance is None:
        return UNKNOWN_LOCATION_SCORE
    return linear_decay(distance, settings.max_service_radius_km)


def score_performance(
    average_rating: float | None,
    is_verified: bool,
    subscription_tier: str | None,
) -> float:
    """Rating baseline plus verification and subscription tier bonuses."""
    rating = _finite(average_rating) or 0.0
    base = _clamp(rating / MAX_RATING)
    verified = VERIFIED_BONUS if is_verified is True else 0.0
    tier = TIER_BONUSES.get((subscription_tier or "").strip().lower(), 0.0)
    return _clamp(base + verified + tier)


def score_availability(availability: str | None) -> float:
    """Fixed score per declared availability."""
    key = (availability or "").strip().lower()
    return AVAILABILITY_SCORES.get(key, UNKNOWN_AVAILABILITY_SCORE)


def _combine(
    event: EventRequirements,
    contractor: ContractorProfile,
    weights: WeightConfig,
    settings: ScoringSettings,
) -> CompatibilityResult:
    service_type = _clamp(
        score_service_type(event.service_requirements, contractor.service_categories)
    )
    experience = _clamp(
        score_experience(
            contractor.average_rating,
            contractor.review_count,
            reference_review_count=settings.reference_review_count,
        )
    )
    pricing = _clamp(score_pricing(event.budget_total, contractor.pricing_range))
    location = _clamp(score_location(event, contractor, settings))
    performance = _clamp(
        score_performance(
            contractor.average_rating, contractor.is_verified, contractor.subscription_tier
        )
    )
    availability = _clamp(score_availability(contractor.availability))

    overall = (
        service_type * weights.service_type
        + experience * weights.experience
        + pricing * weights.pricing
        + location * weights.location
        + performance * weights.performance
        + availability * weights.availability
    )
    return CompatibilityResult(
        service_type_score=service_type,
        experience_score=experience,
        pricing_score=pricing,
        location_score=location,
        performance_score=performance,
        availability_score=availability,
        overall_score=_clamp(overall),
    )


def score(
    event: EventRequirements,
    contractor: ContractorProfile,
    weights: WeightConfig | None = None,
    settings: ScoringSettings | None = None,
) -> CompatibilityResult:
    """Score one contractor against one event.

    Raises:
        ValidationError: If ``event_id`` or ``contractor_id`` is missing.
    """
    _require_identifier(event.event_id, "event_id")
    _require_identifier(contractor.contractor_id, "contractor_id")
    return _combine(event, contractor, normalise_weights(weights), settings or DEFAULT_SETTINGS)


def score_batch(
    event: EventRequirements,
    contractors: Iterable[ContractorProfile],
    weights: WeightConfig | None = None,
    settings: ScoringSettings | None = None,
) -> BatchScores:
    """Score every contractor against ``event``, collecting per-contractor failures.

    Weights are normalised once for the whole batch.

    Raises:
        ValidationError: If the event itself has no ``event_id``.
    """
    _require_identifier(event.event_id, "event_id")
    resolved_weights = normalise_weights(weights)
    resolved_settings = settings or DEFAULT_SETTINGS

    scored: list[ScoredContractor] = []
    failures: list[ScoringFailure] = []
    for index, contractor in enumerate(contractors):
        try:
            contractor_id = _require_identifier(contractor.contractor_id, "contractor_id")
        except ValidationError as exc:
            raw_id = contractor.contractor_id
            failures.append(
                ScoringFailure(
                    index=index,
                    contractor_id=raw_id if isinstance(raw_id, str) else "",
                    error=exc,
                )
            )
            continue
        result = _combine(event, contractor, resolved_weights, resolved_settings)
        scored.append(ScoredContractor(contractor_id=contractor_id, result=result))

    return BatchScores(scored=tuple(scored), failures=tuple(failures))
