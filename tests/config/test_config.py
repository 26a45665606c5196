"""Tests for MatchingConfig behaviour."""

import pytest

import eventpros_matching.config as config_module
from eventpros_matching.config import (
    MatchingConfig,
    PositiveIntegerEnvVarError,
    PositiveNumberEnvVarError,
    ScoreRangeEnvVarError,
)
from eventpros_matching.config_file import MatchingConfigFile


def _patch_env(monkeypatch: pytest.MonkeyPatch, env: dict[str, str]) -> None:
    def fake_getenv(key: str, default: str = "") -> str:
        return env.get(key, default)

    def fake_load_dotenv(dotenv_path: str | None = None) -> bool:
        _ = dotenv_path
        return True

    monkeypatch.setattr(config_module.os, "getenv", fake_getenv)
    monkeypatch.setattr(config_module, "load_dotenv", fake_load_dotenv)


def test_defaults() -> None:
    config = MatchingConfig()

    assert config.ranking_algorithm == "default"
    assert config.page_limit == 20
    assert config.min_score == 0.0
    assert config.max_service_radius_km == 100.0
    assert config.reference_review_count == 20
    assert config.weight_profiles_path == ""


def test_from_env_reads_matching_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env(
        monkeypatch,
        {
            "MATCHING_ALGORITHM": " Performance ",
            "MATCHING_PAGE_LIMIT": "50",
            "MATCHING_MIN_SCORE": "0.4",
            "WEIGHT_PROFILES_PATH": "data/reference/weight_profiles.json",
            "WEIGHT_PROFILE": "budget_first",
            "SERVICE_AREAS_PATH": "data/reference/service_areas.json",
            "MAX_SERVICE_RADIUS_KM": "150.5",
            "REFERENCE_REVIEW_COUNT": "30",
        },
    )

    config = MatchingConfig.from_env()

    assert config.ranking_algorithm == "performance"
    assert config.page_limit == 50
    assert config.min_score == 0.4
    assert config.weight_profiles_path == "data/reference/weight_profiles.json"
    assert config.weight_profile == "budget_first"
    assert config.service_areas_path == "data/reference/service_areas.json"
    assert config.max_service_radius_km == 150.5
    assert config.reference_review_count == 30


def test_from_env_uses_defaults_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_env(monkeypatch, {})

    assert MatchingConfig.from_env() == MatchingConfig()


@pytest.mark.parametrize(
    ("env", "error"),
    [
        ({"MATCHING_PAGE_LIMIT": "0"}, PositiveIntegerEnvVarError),
        ({"MATCHING_PAGE_LIMIT": "ten"}, PositiveIntegerEnvVarError),
        ({"REFERENCE_REVIEW_COUNT": "-5"}, PositiveIntegerEnvVarError),
        ({"MAX_SERVICE_RADIUS_KM": "0"}, PositiveNumberEnvVarError),
        ({"MAX_SERVICE_RADIUS_KM": "inf"}, PositiveNumberEnvVarError),
        ({"MAX_SERVICE_RADIUS_KM": "nan"}, PositiveNumberEnvVarError),
        ({"MATCHING_MIN_SCORE": "1.5"}, ScoreRangeEnvVarError),
        ({"MATCHING_MIN_SCORE": "high"}, ScoreRangeEnvVarError),
    ],
)
def test_from_env_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, env: dict[str, str], error: type[ValueError]
) -> None:
    _patch_env(monkeypatch, env)

    with pytest.raises(error, match=next(iter(env))):
        MatchingConfig.from_env()


def test_with_overrides_preserves_fields() -> None:
    base = MatchingConfig(
        weight_profiles_path="profiles.json",
        weight_profile="default",
        service_areas_path="areas.json",
        max_service_radius_km=80.0,
        reference_review_count=12,
    )

    updated = base.with_overrides(ranking_algorithm="PERFORMANCE", min_score=0.3)

    assert updated.ranking_algorithm == "performance"
    assert updated.min_score == 0.3
    assert updated.page_limit == base.page_limit
    assert updated.weight_profiles_path == "profiles.json"
    assert updated.weight_profile == "default"
    assert updated.service_areas_path == "areas.json"
    assert updated.max_service_radius_km == 80.0
    assert updated.reference_review_count == 12


def test_with_overrides_none_keeps_values() -> None:
    base = MatchingConfig(page_limit=5, weight_profile="x")

    assert base.with_overrides() == base


def test_with_file_overrides_only_replaces_set_values() -> None:
    base = MatchingConfig(page_limit=5, weight_profile="env_profile")
    file_config = MatchingConfigFile(
        ranking_algorithm="Performance",
        min_score=0.5,
        service_areas_path="areas.json",
    )

    updated = base.with_file_overrides(file_config)

    assert updated.ranking_algorithm == "performance"
    assert updated.min_score == 0.5
    assert updated.service_areas_path == "areas.json"
    assert updated.page_limit == 5
    assert updated.weight_profile == "env_profile"


def test_cli_overrides_win_over_file_and_env() -> None:
    env_config = MatchingConfig(page_limit=10, min_score=0.1)
    file_config = MatchingConfigFile(page_limit=30, min_score=0.2)

    final = env_config.with_file_overrides(file_config).with_overrides(min_score=0.7)

    assert final.page_limit == 30
    assert final.min_score == 0.7
