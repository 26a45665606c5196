"""Tests for loading the service-area gazetteer."""

from __future__ import annotations

from pathlib import Path

import pytest

from eventpros_matching.application.service_areas import load_service_areas
from eventpros_matching.domain.service_areas import resolve_service_area
from eventpros_matching.exceptions import ServiceAreaFileNotFoundError
from eventpros_matching.infrastructure import LocalFileSystem
from tests.fakes import InMemoryFileSystem


def test_load_service_areas_without_path_is_empty() -> None:
    assert load_service_areas(path=None, fs=InMemoryFileSystem()) == ()


def test_load_service_areas_missing_file() -> None:
    with pytest.raises(ServiceAreaFileNotFoundError):
        load_service_areas(path=Path("missing.json"), fs=InMemoryFileSystem())


def test_load_service_areas_parses_entries() -> None:
    fs = InMemoryFileSystem()
    path = Path("areas.json")
    fs.write_json(
        {
            "areas": [
                {
                    "canonical_name": "Christchurch",
                    "aliases": ["Otautahi"],
                    "lat": "-43.5321",
                    "lng": 172.6362,
                },
                {"canonical_name": "Broken", "lat": None, "lng": 172.0},
            ]
        },
        path,
    )

    areas = load_service_areas(path=path, fs=fs)

    assert len(areas) == 1
    assert areas[0].location.lat == -43.5321
    assert resolve_service_area("otautahi", areas) is areas[0]


def test_bundled_gazetteer_covers_main_centres() -> None:
    path = Path(__file__).resolve().parents[2] / "data" / "reference" / "service_areas.json"

    areas = load_service_areas(path=path, fs=LocalFileSystem())

    for name in ("Auckland", "Wellington", "Christchurch", "Tamaki Makaurau"):
        assert resolve_service_area(name, areas) is not None
