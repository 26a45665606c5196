"""Boundary-neutral IO contracts produced by inbound validation.

Usage example:
    from eventpros_matching.io_contracts import ContractorProfileIO

    contractor: ContractorProfileIO = {
        "contractor_id": "con-1",
        "company_name": "Harbour Lens",
        "service_categories": ["photography"],
        "service_areas": ["Auckland"],
        "pricing_range": {"min": 500.0, "max": 1000.0},
        "location": None,
        "availability": "flexible",
        "is_verified": True,
        "subscription_tier": "spotlight",
        "average_rating": 4.8,
        "review_count": 37,
    }
"""

from __future__ import annotations

from typing_extensions import TypedDict


class GeoLocationIO(TypedDict):
    """Coordinate payload shape."""

    lat: float
    lng: float
    address: str


class PricingRangeIO(TypedDict):
    """Price band payload shape."""

    min: float
    max: float


class EventRequirementsIO(TypedDict):
    """Event requirements payload shape after coercion."""

    event_id: str
    event_type: str
    event_date: str
    duration_hours: float | None
    location: GeoLocationIO | None
    budget_total: float | None
    service_requirements: list[str]
    special_requirements: str | None


class ContractorProfileIO(TypedDict):
    """Contractor profile payload shape after coercion."""

    contractor_id: str
    company_name: str
    service_categories: list[str]
    service_areas: list[str]
    pricing_range: PricingRangeIO | None
    location: GeoLocationIO | None
    availability: str | None
    is_verified: bool
    subscription_tier: str | None
    average_rating: float | None
    review_count: int | None


class ServiceAreaIO(TypedDict):
    """Gazetteer entry payload shape."""

    canonical_name: str
    aliases: list[str]
    lat: float
    lng: float
