"""Pydantic-based validation helpers for inbound event, contractor and gazetteer payloads.

Shapes are checked strictly (payloads must be objects, lists must be lists); scalar fields
are coerced leniently so that a malformed optional value degrades to ``None`` instead of
rejecting the whole record.
"""

from __future__ import annotations

import math
from datetime import date
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError
from typing_extensions import TypedDict

from ...io_contracts import (
    ContractorProfileIO,
    EventRequirementsIO,
    GeoLocationIO,
    PricingRangeIO,
    ServiceAreaIO,
)


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


class LocationInput(TypedDict, total=False):
    lat: object
    lng: object
    address: object


class PricingRangeInput(TypedDict, total=False):
    min: object
    max: object


class ServiceInput(TypedDict, total=False):
    category: object
    price_range_min: object
    price_range_max: object


class EventInput(TypedDict, total=False):
    event_id: object
    id: object
    event_type: object
    event_date: object
    duration_hours: object
    location: object
    location_data: object
    budget_total: object
    service_requirements: object
    special_requirements: object


class ContractorInput(TypedDict, total=False):
    contractor_id: object
    id: object
    company_name: object
    service_categories: object
    service_areas: object
    pricing_range: object
    services: object
    location: object
    availability: object
    is_verified: object
    subscription_tier: object
    average_rating: object
    review_count: object


class ContractorsFileInput(TypedDict, total=False):
    contractors: list[object]


class ServiceAreaInput(TypedDict, total=False):
    canonical_name: object
    aliases: object
    lat: object
    lng: object


class ServiceAreasFileInput(TypedDict, total=False):
    areas: list[object]


SchemaT = TypeVar("SchemaT")


def validate_as(schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except ValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def _as_str(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_optional_str(value: object) -> str | None:
    text = _as_str(value)
    return text or None


def _as_identifier(value: object) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value)
    return _as_str(value)


def _as_float(value: object) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_non_negative_float(value: object) -> float | None:
    number = _as_float(value)
    if number is None or number < 0.0:
        return None
    return number


def _as_count(value: object) -> int | None:
    number = _as_float(value)
    if number is None or number < 0.0 or not number.is_integer():
        return None
    return int(number)


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def _as_object_list(value: object) -> list[object]:
    if value is None:
        return []
    try:
        return validate_as(list[object], value)
    except IncomingDataError:
        return []


def _as_str_list(value: object) -> list[str]:
    cleaned: list[str] = []
    for item in _as_object_list(value):
        text = _as_str(item)
        if text:
            cleaned.append(text)
    return cleaned


def _as_iso_date(value: object) -> str:
    text = _as_str(value)
    if not text:
        return ""
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        return ""


def _as_location(value: object) -> GeoLocationIO | None:
    if value is None:
        return None
    try:
        location = validate_as(LocationInput, value)
    except IncomingDataError:
        return None
    lat = _as_float(location.get("lat"))
    lng = _as_float(location.get("lng"))
    if lat is None or lng is None or not (-90.0 <= lat <= 90.0) or not (-180.0 <= lng <= 180.0):
        return None
    return {"lat": lat, "lng": lng, "address": _as_str(location.get("address"))}


def _as_pricing_range(value: object) -> PricingRangeIO | None:
    if value is None:
        return None
    try:
        pricing = validate_as(PricingRangeInput, value)
    except IncomingDataError:
        return None
    low = _as_non_negative_float(pricing.get("min"))
    high = _as_non_negative_float(pricing.get("max"))
    if low is None or high is None or high < low:
        return None
    return {"min": low, "max": high}


def _pricing_from_services(services: object) -> PricingRangeIO | None:
    """Span the lowest minimum and highest maximum across priced services."""
    bands: list[tuple[float, float]] = []
    for raw_service in _as_object_list(services):
        try:
            service = validate_as(ServiceInput, raw_service)
        except IncomingDataError:
            continue
        low = _as_non_negative_float(service.get("price_range_min"))
        high = _as_non_negative_float(service.get("price_range_max"))
        if low and high and high >= low:
            bands.append((low, high))
    if not bands:
        return None
    return {"min": min(low for low, _ in bands), "max": max(high for _, high in bands)}


def _as_service_requirements(value: object) -> list[str]:
    """Accept plain category names or ``{"category": ...}`` objects; drop anything else."""
    requirements: list[str] = []
    for item in _as_object_list(value):
        if isinstance(item, str):
            text = item.strip()
        else:
            try:
                service = validate_as(ServiceInput, item)
            except IncomingDataError:
                continue
            text = _as_str(service.get("category"))
        if text:
            requirements.append(text)
    return requirements


def parse_event_requirements(payload: object) -> EventRequirementsIO:
    event = validate_as(EventInput, payload)
    location_payload = event.get("location")
    if not isinstance(location_payload, dict):
        location_payload = event.get("location_data")
    return {
        "event_id": _as_identifier(event.get("event_id") or event.get("id")),
        "event_type": _as_str(event.get("event_type")) or "general",
        "event_date": _as_iso_date(event.get("event_date")),
        "duration_hours": _as_non_negative_float(event.get("duration_hours")),
        "location": _as_location(location_payload),
        "budget_total": _as_non_negative_float(event.get("budget_total")),
        "service_requirements": _as_service_requirements(event.get("service_requirements")),
        "special_requirements": _as_optional_str(event.get("special_requirements")),
    }


def parse_contractor_profile(payload: object) -> ContractorProfileIO:
    contractor = validate_as(ContractorInput, payload)
    pricing = _as_pricing_range(contractor.get("pricing_range"))
    if pricing is None:
        pricing = _pricing_from_services(contractor.get("services"))
    rating = _as_float(contractor.get("average_rating"))
    if rating is not None and not (0.0 <= rating <= 5.0):
        rating = None
    return {
        "contractor_id": _as_identifier(contractor.get("contractor_id") or contractor.get("id")),
        "company_name": _as_str(contractor.get("company_name")),
        "service_categories": _as_service_requirements(contractor.get("service_categories")),
        "service_areas": _as_str_list(contractor.get("service_areas")),
        "pricing_range": pricing,
        "location": _as_location(contractor.get("location")),
        "availability": _as_optional_str(contractor.get("availability")),
        "is_verified": _as_bool(contractor.get("is_verified")),
        "subscription_tier": _as_optional_str(contractor.get("subscription_tier")),
        "average_rating": rating,
        "review_count": _as_count(contractor.get("review_count")),
    }


def parse_contractors_file(payload: object) -> list[ContractorProfileIO]:
    contractors_file = validate_as(ContractorsFileInput, payload)
    return [parse_contractor_profile(item) for item in contractors_file.get("contractors", [])]


def parse_service_areas(payload: object) -> list[ServiceAreaIO]:
    areas_file = validate_as(ServiceAreasFileInput, payload)
    areas: list[ServiceAreaIO] = []
    for raw_area in areas_file.get("areas", []):
        area = validate_as(ServiceAreaInput, raw_area)
        lat = _as_float(area.get("lat"))
        lng = _as_float(area.get("lng"))
        name = _as_str(area.get("canonical_name"))
        if not name or lat is None or lng is None:
            continue
        areas.append(
            {
                "canonical_name": name,
                "aliases": _as_str_list(area.get("aliases")),
                "lat": lat,
                "lng": lng,
            }
        )
    return areas
