"""Domain records for events, contractors and compatibility results.

Usage example:
    from eventpros_matching.domain.models import (
        ContractorProfile,
        EventRequirements,
        GeoLocation,
        PricingRange,
    )

    event = EventRequirements(
        event_id="evt-1",
        event_type="wedding",
        location=GeoLocation(lat=-36.8485, lng=174.7633, address="Auckland"),
        budget_total=2000.0,
        service_requirements=("photography",),
    )
    contractor = ContractorProfile(
        contractor_id="con-1",
        company_name="Harbour Lens",
        service_categories=frozenset({"photography"}),
        pricing_range=PricingRange(min=500.0, max=1000.0),
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

SUBSCRIPTION_TIERS = ("essential", "showcase", "spotlight")
PREMIUM_TIERS = frozenset({"showcase", "spotlight"})


@dataclass(frozen=True)
class GeoLocation:
    """A point on the earth's surface in decimal degrees."""

    lat: float
    lng: float
    address: str = ""


@dataclass(frozen=True)
class PricingRange:
    """Contractor price band in the marketplace currency."""

    min: float
    max: float

    @property
    def width(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class EventRequirements:
    """What an event manager needs, as seen by the scorer."""

    event_id: str
    event_type: str = "general"
    event_date: date | None = None
    duration_hours: float | None = None
    location: GeoLocation | None = None
    budget_total: float | None = None
    service_requirements: tuple[str, ...] = field(default_factory=tuple)
    special_requirements: str | None = None


@dataclass(frozen=True)
class ContractorProfile:
    """A contractor's business profile, as seen by the scorer."""

    contractor_id: str
    company_name: str = ""
    service_categories: frozenset[str] = field(default_factory=frozenset)
    service_areas: tuple[str, ...] = field(default_factory=tuple)
    pricing_range: PricingRange | None = None
    location: GeoLocation | None = None
    availability: str | None = None
    is_verified: bool = False
    subscription_tier: str | None = None
    average_rating: float | None = None
    review_count: int | None = None

    @property
    def is_premium(self) -> bool:
        return (self.subscription_tier or "").strip().lower() in PREMIUM_TIERS


@dataclass(frozen=True)
class CompatibilityResult:
    """Per-factor and overall compatibility for one (event, contractor) pair.

    All values are on a 0.0–1.0 scale.
    """

    service_type_score: float
    experience_score: float
    pricing_score: float
    location_score: float
    performance_score: float
    availability_score: float
    overall_score: float


@dataclass(frozen=True)
class ScoredContractor:
    """A compatibility result tagged with the contractor it belongs to."""

    contractor_id: str
    result: CompatibilityResult


@dataclass(frozen=True)
class RankedEntry:
    """One position in a ranking (ranks are 1-based and unique)."""

    contractor_id: str
    overall_score: float
    rank: int
