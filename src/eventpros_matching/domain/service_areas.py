"""Service-area gazetteer: resolving contractor area names to coordinates.

Usage example:
    from eventpros_matching.domain.service_areas import (
        build_service_areas,
        resolve_service_area,
    )

    areas = build_service_areas([
        {
            "canonical_name": "Auckland",
            "aliases": ["Tamaki Makaurau", "Auckland CBD"],
            "lat": -36.8485,
            "lng": 174.7633,
        }
    ])
    area = resolve_service_area("auckland cbd", areas)
    assert area is not None and area.canonical_name == "Auckland"
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..io_contracts import ServiceAreaIO
from .geo import haversine_km, is_valid_location
from .models import GeoLocation


@dataclass(frozen=True)
class ServiceArea:
    """Canonical area definition with aliases and a representative point."""

    canonical_name: str
    aliases: tuple[str, ...]
    location: GeoLocation

    def all_match_terms(self) -> tuple[str, ...]:
        return _dedupe_terms(_normalise_terms([self.canonical_name, *self.aliases]))


def build_service_areas(payloads: Iterable[ServiceAreaIO]) -> tuple[ServiceArea, ...]:
    areas: list[ServiceArea] = []
    for payload in payloads:
        name = payload["canonical_name"].strip()
        location = GeoLocation(lat=payload["lat"], lng=payload["lng"], address=name)
        if not name or not is_valid_location(location):
            continue
        areas.append(
            ServiceArea(
                canonical_name=name,
                aliases=_dedupe_terms(_normalise_terms(payload["aliases"])),
                location=location,
            )
        )
    return tuple(areas)


def resolve_service_area(query: str | None, areas: Iterable[ServiceArea]) -> ServiceArea | None:
    if not query:
        return None
    target = _normalise_text(query)
    for area in areas:
        if target in area.all_match_terms():
            return area
    return None


def nearest_service_area_distance(
    origin: GeoLocation,
    area_names: Iterable[str],
    areas: Iterable[ServiceArea],
) -> float | None:
    """Distance in km from ``origin`` to the closest resolvable area, or None."""
    known = tuple(areas)
    distances: list[float] = []
    for name in area_names:
        area = resolve_service_area(name, known)
        if area is not None:
            distances.append(haversine_km(origin, area.location))
    return min(distances) if distances else None


def _normalise_text(value: str) -> str:
    return value.strip().lower()


def _normalise_terms(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(_normalise_text(value) for value in values if value.strip())


def _dedupe_terms(values: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    deduped: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            deduped.append(value)
    return tuple(deduped)
