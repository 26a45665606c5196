"""Loading event and contractor inputs into domain records."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from ..domain.models import ContractorProfile, EventRequirements, GeoLocation, PricingRange
from ..exceptions import InputFileNotFoundError
from ..infrastructure.io.validation import (
    parse_contractor_profile,
    parse_contractors_file,
    parse_event_requirements,
)
from ..io_contracts import ContractorProfileIO, EventRequirementsIO, GeoLocationIO
from ..protocols import FileSystem


def _to_location(payload: GeoLocationIO | None) -> GeoLocation | None:
    if payload is None:
        return None
    return GeoLocation(lat=payload["lat"], lng=payload["lng"], address=payload["address"])


def _to_date(value: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def build_event_requirements(payload: EventRequirementsIO) -> EventRequirements:
    return EventRequirements(
        event_id=payload["event_id"],
        event_type=payload["event_type"],
        event_date=_to_date(payload["event_date"]),
        duration_hours=payload["duration_hours"],
        location=_to_location(payload["location"]),
        budget_total=payload["budget_total"],
        service_requirements=tuple(payload["service_requirements"]),
        special_requirements=payload["special_requirements"],
    )


def build_contractor_profile(payload: ContractorProfileIO) -> ContractorProfile:
    pricing = payload["pricing_range"]
    return ContractorProfile(
        contractor_id=payload["contractor_id"],
        company_name=payload["company_name"],
        service_categories=frozenset(payload["service_categories"]),
        service_areas=tuple(payload["service_areas"]),
        pricing_range=PricingRange(min=pricing["min"], max=pricing["max"]) if pricing else None,
        location=_to_location(payload["location"]),
        availability=payload["availability"],
        is_verified=payload["is_verified"],
        subscription_tier=payload["subscription_tier"],
        average_rating=payload["average_rating"],
        review_count=payload["review_count"],
    )


def load_event_requirements(*, path: Path, fs: FileSystem) -> EventRequirements:
    """Read one event from a JSON object file."""
    if not fs.exists(path):
        raise InputFileNotFoundError(str(path))
    return build_event_requirements(parse_event_requirements(fs.read_json(path)))


def load_contractor_profile(*, path: Path, fs: FileSystem) -> ContractorProfile:
    """Read one contractor from a JSON object file."""
    if not fs.exists(path):
        raise InputFileNotFoundError(str(path))
    return build_contractor_profile(parse_contractor_profile(fs.read_json(path)))


def load_contractor_profiles(*, path: Path, fs: FileSystem) -> list[ContractorProfile]:
    """Read contractors from a JSON file shaped ``{"contractors": [...]}``."""
    if not fs.exists(path):
        raise InputFileNotFoundError(str(path))
    return [build_contractor_profile(item) for item in parse_contractors_file(fs.read_json(path))]
